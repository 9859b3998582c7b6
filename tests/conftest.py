import pytest
from fastapi.testclient import TestClient

from golinks.config import Settings
from golinks.database import make_engine
from golinks.main import create_app
from golinks.store import LinkStore


@pytest.fixture
def db_file(tmp_path):
    return tmp_path / "links.db"


@pytest.fixture
def store(db_file):
    """Fresh store on a temp-file SQLite database for each test."""
    s = LinkStore(make_engine(db_file))
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client(store, db_file):
    app = create_app(Settings(db_path=str(db_file)), store=store)
    return TestClient(app, follow_redirects=False)
