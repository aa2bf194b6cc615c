"""Base schema class with camelCase alias generation.

Backend Python code stays snake_case. API JSON output becomes camelCase,
matching the field names the viewer client reads (fileId, resultId, ...).
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase, outputs camelCase."""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }
