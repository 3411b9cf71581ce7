import json

import pytest

from server import create_app
from utils.file_ops import DocumentStore


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "public" / "database.json"


@pytest.fixture
def store(db_path):
    return DocumentStore(db_path)


@pytest.fixture
def app(store):
    app = create_app(store=store, config_override={"TESTING": True})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def write_document(db_path):
    """Put a document on disk, optionally with system settings."""

    def _write(settings=None, **collections):
        document = {
            "users": [],
            "conversations": [],
            "roles": [],
            "ads": [],
            "countryBans": [],
        }
        document.update(collections)
        if settings is not None:
            document["systemSettings"] = settings
        db_path.parent.mkdir(parents=True, exist_ok=True)
        db_path.write_text(json.dumps(document), encoding="utf-8")
        return document

    return _write
