import pytest
from fastapi.testclient import TestClient

from dicom_insight.config import Settings
from dicom_insight.main import create_app
from dicom_insight.services.file_storage import FileStorageService
from dicom_insight.store import RecordStore


@pytest.fixture
def make_dicom_bytes():
    """Returns a builder for minimal Part 10 bytes: 128-byte preamble, DICM marker, payload."""
    def _make(body: bytes = b"\x02\x00\x00\x00") -> bytes:
        return b"\x00" * 128 + b"DICM" + body
    return _make


@pytest.fixture
def uploads_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def make_settings(uploads_dir):
    """Returns a factory for test settings over a temp uploads dir with no delay."""
    def _make(**overrides):
        values = {
            "FILE_STORAGE_PATH": str(uploads_dir),
            "PROCESS_DELAY_SECONDS": 0,
            "CORS_ORIGINS": "*",
        }
        values.update(overrides)
        return Settings(**values)
    return _make


@pytest.fixture
def make_client(make_settings):
    """Returns a factory building a TestClient around a fresh app."""
    clients = []

    def _make(enhancer=None, **overrides):
        app = create_app(make_settings(**overrides), enhancer=enhancer)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def store():
    return RecordStore()


@pytest.fixture
def file_storage(uploads_dir):
    return FileStorageService(uploads_dir, chunk_size=16)
