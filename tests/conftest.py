import pytest

from app import create_app
from config import TestingConfig
from extensions import db


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, email="student@example.edu", role="student", password="secret123"):
    return client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "first_name": "Sam",
        "last_name": "Rivera",
        "role": role,
        "year": "2",
        "major": "Biology",
    })


@pytest.fixture
def student(client):
    """A registered student whose session is active on ``client``."""
    response = register(client)
    assert response.status_code == 201
    return response.get_json()["user"]
