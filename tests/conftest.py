"""
Pytest configuration for the test suite.

Every test gets its own application on an in-memory SQLite backend (the SQL
driver), seeded with the admin account of ``TestingConfig``.
"""
import pytest

from clinic import create_app
from clinic.config import TestingConfig


@pytest.fixture
def app(tmp_path):
    """Application on the SQL driver with uploads kept under a temp dir"""
    app = create_app('testing', {'UPLOAD_FOLDER': str(tmp_path / 'uploads')})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    """Test client signed in as the seeded admin"""
    response = client.post('/auth/login', json={
        'email': TestingConfig.ADMIN_EMAIL,
        'password': TestingConfig.ADMIN_PASSWORD
    })
    assert response.status_code == 200, response.get_json()
    return client


@pytest.fixture
def make_client(auth_client):
    """Create a client through the API and return the stored record"""
    def _make(**fields):
        payload = {'name': 'Ana Souza', 'phone': '(11) 98765-4321', 'status': 'LEAD'}
        payload.update(fields)
        response = auth_client.post('/clients', json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()['client']
    return _make


@pytest.fixture
def make_appointment(auth_client):
    def _make(client_id, **fields):
        payload = {
            'client_id': client_id,
            'professional_id': 'u-admin',
            'procedure': 'Botox',
            'date': '2024-03-12',
            'time': '10:00'
        }
        payload.update(fields)
        response = auth_client.post('/calendar/appointments', json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()['appointment']
    return _make
