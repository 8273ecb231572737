import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app  # noqa: E402
from config import TestConfig  # noqa: E402
from extensions import db  # noqa: E402


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_student(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {
            "fullName": f"Student {counter['n']}",
            "phone": f"+9230012345{counter['n']:02d}",
            "flatName": "Ramsha Avenue",
            "flatNo": f"B-{100 + counter['n']}",
            "monthlyFee": 1500,
            "feeDueDate": 10,
        }
        payload.update(overrides)
        resp = client.post("/api/students", json=payload)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _make
