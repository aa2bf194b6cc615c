"""Error taxonomy for the API.

Handlers raise these; the exception handlers registered in ``main`` turn
them into ``{"error": ..., "code": ...}`` JSON bodies.
"""


class DicomInsightError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class BadRequest(DicomInsightError):
    status_code = 400
    code = "bad_request"
    default_message = "Bad request"


# The upload contract reports type and size rejections as 400.
class UnsupportedMediaType(DicomInsightError):
    status_code = 400
    code = "unsupported_media_type"
    default_message = "Only DICOM (.dcm) files are allowed"


class PayloadTooLarge(DicomInsightError):
    status_code = 400
    code = "payload_too_large"
    default_message = "File exceeds the maximum upload size"


class NotFound(DicomInsightError):
    status_code = 404
    code = "not_found"
    default_message = "File not found"


class InternalError(DicomInsightError):
    pass
