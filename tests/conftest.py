"""
Pytest fixtures for the OpenStock API tests.

Every test gets its own app over three fresh SQLite files in a temporary
directory, plus a clock it can move by hand.
"""

import pytest
from fastapi.testclient import TestClient

from openstock.config import Settings
from openstock.main import create_app
from openstock.utils.clock import current_date_and_time


class FixedClock:
    """Replacement for the clock dependency; tests set ``date`` and ``time`` directly."""

    def __init__(self, date="2024-03-04", time="09:00"):
        self.date = date
        self.time = time

    def __call__(self):
        return self.date, self.time


@pytest.fixture
def settings(tmp_path):
    return Settings(DATA_DIR=str(tmp_path / "data"), LOG_LEVEL="WARNING")


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def app(settings, clock):
    app = create_app(settings)
    app.dependency_overrides[current_date_and_time] = clock
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_product(client):
    def _make(**overrides):
        body = {"name": "Fridge", "sku": None, "cost_price": 100.0, "stock_min": 2}
        body.update(overrides)
        resp = client.post("/products/", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_employee(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        body = {
            "first_name": "Ama",
            "last_name": f"Mensah{counter['n']}",
            "email": f"ama{counter['n']}@example.com",
            "hire_date": "2023-01-09",
            "base_salary": 3000,
        }
        body.update(overrides)
        resp = client.post("/employees/", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_period(client):
    def _make(**overrides):
        body = {"name": "March 2024", "start_date": "2024-03-01", "end_date": "2024-03-31"}
        body.update(overrides)
        resp = client.post("/payroll/periods", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
