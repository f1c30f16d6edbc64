from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from barberzon import models  # noqa: F401  registers the tables
from barberzon.db import get_session
from barberzon.main import app
from barberzon.services.paystack import PaystackError, PaystackService, get_paystack

WEBHOOK_SECRET = "sk_test_secret"


class FakePaystack(PaystackService):
    """Records gateway calls instead of talking to Paystack."""

    def __init__(self):
        super().__init__(secret_key=WEBHOOK_SECRET, base_url="https://paystack.invalid")
        self.initialized = []
        self.verify_status = "success"
        self.fail = False

    def initialize_transaction(self, amount_kobo, email, reference=None, metadata=None):
        if self.fail:
            raise PaystackError("gateway down")
        self.initialized.append({"amount": amount_kobo, "email": email, "reference": reference})
        return {
            "status": True,
            "data": {
                "authorization_url": f"https://checkout.paystack.com/{reference}",
                "access_code": "ACCESS",
                "reference": reference,
            },
        }

    def verify_transaction(self, reference):
        if self.fail:
            raise PaystackError("gateway down")
        return {"status": True, "data": {"status": self.verify_status, "reference": reference}}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def paystack():
    return FakePaystack()


@pytest.fixture
def client(engine, paystack):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_paystack] = lambda: paystack
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user and return (auth headers, response body)."""

    def _register(email, role="customer", full_name="Test User", password="password123"):
        response = client.post("/api/auth/register", json={
            "email": email,
            "password": password,
            "full_name": full_name,
            "phone_number": "08012345678",
            "role": role,
        })
        assert response.status_code == 201, response.text
        body = response.json()
        return auth_header(body["access_token"]), body

    return _register


@pytest.fixture
def customer(register):
    headers, _ = register("ada@example.com", "customer", "Ada Obi")
    return headers


@pytest.fixture
def barber(client, register):
    headers, _ = register("tunde@example.com", "barber", "Tunde Cuts")
    response = client.put("/api/barbers/profile", json={
        "specialties": ["fade"],
        "hourly_rate": 5000,
        "completed_onboarding": True,
    }, headers=headers)
    assert response.status_code == 200, response.text
    return headers


@pytest.fixture
def barber_id(client, barber):
    return client.get("/api/barbers/profile", headers=barber).json()["id"]


@pytest.fixture
def shop(client, barber):
    response = client.post("/api/barber-requests/shops", json={
        "name": "Fresh Cuts",
        "address": "12 Allen Avenue, Ikeja",
        "total_seats": 4,
        "location_lat": 6.6018,
        "location_lng": 3.3515,
    }, headers=barber)
    assert response.status_code == 201, response.text
    return response.json()


def in_hours(hours):
    return (datetime.now() + timedelta(hours=hours)).replace(microsecond=0).isoformat()


@pytest.fixture
def make_booking(client, customer, barber_id):
    def _make(hours=24, services=None, headers=None):
        response = client.post("/api/bookings", json={
            "barber_id": barber_id,
            "booking_date": in_hours(hours),
            "services": services if services is not None else [{"name": "Haircut", "price": 5000}],
        }, headers=headers or customer)
        assert response.status_code == 201, response.text
        return response.json()

    return _make
