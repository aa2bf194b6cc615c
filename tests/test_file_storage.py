import asyncio
import io
from pathlib import Path

import pytest
from fastapi import UploadFile

from dicom_insight.errors import InternalError, PayloadTooLarge
from dicom_insight.services.file_storage import FileStorageService


def _upload(data: bytes, name: str = "scan.dcm") -> UploadFile:
    # No size declared, like a chunked request body
    return UploadFile(file=io.BytesIO(data), filename=name)


def test_save_upload_streams_to_generated_name(file_storage, uploads_dir, make_dicom_bytes):
    data = make_dicom_bytes(b"x" * 100)

    stored = asyncio.run(file_storage.save_upload(_upload(data), max_bytes=1024))

    assert stored.stored_name.endswith(".dcm")
    assert stored.stored_name != "scan.dcm"
    assert stored.byte_size == len(data)
    assert Path(stored.stored_path).is_absolute()
    assert Path(stored.stored_path).parent == uploads_dir.resolve()
    assert Path(stored.stored_path).read_bytes() == data


def test_save_upload_over_limit_removes_partial_file(file_storage, uploads_dir):
    with pytest.raises(PayloadTooLarge):
        asyncio.run(file_storage.save_upload(_upload(b"x" * 200), max_bytes=100))

    assert list(uploads_dir.iterdir()) == []


def test_save_upload_io_failure_is_internal_error(file_storage, uploads_dir):
    uploads_dir.rmdir()

    with pytest.raises(InternalError):
        asyncio.run(file_storage.save_upload(_upload(b"abc"), max_bytes=100))


def test_save_and_read_round_trip(file_storage):
    stored = asyncio.run(file_storage.save(b"payload"))

    assert stored.byte_size == 7
    assert asyncio.run(file_storage.read(stored.stored_path)) == b"payload"


def test_each_save_gets_a_fresh_name(file_storage):
    first = asyncio.run(file_storage.save(b"a"))
    second = asyncio.run(file_storage.save(b"a"))

    assert first.stored_name != second.stored_name


def test_exists_and_delete(file_storage):
    stored = asyncio.run(file_storage.save(b"a"))

    assert asyncio.run(file_storage.exists(stored.stored_path)) is True
    asyncio.run(file_storage.delete(stored.stored_path))
    assert asyncio.run(file_storage.exists(stored.stored_path)) is False
    # Deleting twice is harmless
    asyncio.run(file_storage.delete(stored.stored_path))


def test_exists_is_false_for_directories(file_storage, uploads_dir):
    assert asyncio.run(file_storage.exists(str(uploads_dir))) is False


def test_dicom_magic_detection(file_storage, make_dicom_bytes):
    dicom = asyncio.run(file_storage.save(make_dicom_bytes()))
    plain = asyncio.run(file_storage.save(b"not a dicom file"))
    shifted = asyncio.run(file_storage.save(b"DICM" + b"\x00" * 200))

    assert asyncio.run(file_storage.has_dicom_magic(dicom.stored_path)) is True
    assert asyncio.run(file_storage.has_dicom_magic(plain.stored_path)) is False
    assert asyncio.run(file_storage.has_dicom_magic(shifted.stored_path)) is False


def test_creates_base_directory(tmp_path):
    target = tmp_path / "nested" / "uploads"

    FileStorageService(target)

    assert target.is_dir()
