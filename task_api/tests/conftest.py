import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from task_api.database import Database
from task_api.main import create_app


@pytest.fixture(name="database")
def database_fixture():
    """Fresh in-memory store per test."""
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture(name="session")
def session_fixture(database: Database):
    with Session(database.engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture():
    """Test client around an app with its own in-memory database."""
    app = create_app("sqlite://")
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def make_task(client: TestClient):
    """Create a task over HTTP and return its JSON."""
    def _make(title: str = "Write report", status: str = "pending") -> dict:
        response = client.post("/tasks", json={"title": title, "status": status})
        assert response.status_code == 201, response.text
        return response.json()
    return _make
