import pytest
from borneo import TableNotFoundException
from fastapi.testclient import TestClient

from session_manager.api.deps import get_session_service
from session_manager.boundary.nosql.table_schema import CapacityLimits
from session_manager.core.exceptions import RequestTimeoutError
from session_manager.main import create_app


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    # Not used as a context manager, so the lifespan (and store connection) never runs
    return TestClient(app)


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db(app, client, mock_session_service):
    mock_session_service.get_table_limits.return_value = CapacityLimits()
    app.dependency_overrides[get_session_service] = lambda: mock_session_service

    response = client.get("/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Session table reachable"}


def test_health_check_db_unavailable(app, client, mock_session_service):
    mock_session_service.get_table_limits.side_effect = RequestTimeoutError("get_table")
    app.dependency_overrides[get_session_service] = lambda: mock_session_service

    response = client.get("/health/db")

    assert response.status_code == 503


def test_health_check_db_missing_table(app, client, mock_session_service):
    mock_session_service.get_table_limits.side_effect = TableNotFoundException(
        "Table not found: persistent_session"
    )
    app.dependency_overrides[get_session_service] = lambda: mock_session_service

    response = client.get("/health/db")

    assert response.status_code == 503


def test_session_routes_without_handle_return_503(client):
    response = client.get("/sessionmanager/getsession/1/1")
    assert response.status_code == 503


def test_correlation_id_is_echoed(client):
    response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"


def test_correlation_id_is_generated(client):
    response = client.get("/health")
    assert response.headers["X-Correlation-ID"]
