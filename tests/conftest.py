"""
Test configuration and fixtures
"""
import pytest
from datetime import date, datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from database.connection import Base, get_db

# Import all models BEFORE importing app to ensure they're registered
from models import BusinessPartner, Event, Interest, Offer, User

from main import app
from services import events
from stores.memory_store import MemoryStore
from utils.mailer import EmailSender, SendResult, get_email_sender

# Test database (file-based SQLite for better connection handling)
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    echo=False  # Set to True to debug SQL
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123!"


class RecordingEmailSender(EmailSender):
    """Keeps sent messages in memory; addresses in `failing` are rejected"""

    def __init__(self):
        self.sent = []
        self.failing = set()

    def send(self, message):
        if message.to in self.failing:
            return SendResult(success=False, message="Failed to send email. Please try again later.")
        self.sent.append(message)
        return SendResult(success=True, message="Email sent successfully")


@pytest.fixture
def db_session():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def client(db_session, email_sender):
    """Create a test client with test database"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def memory_store():
    """Empty in-memory store for service-level tests"""
    return MemoryStore()


def register(client, email="host@example.com", username="host"):
    """Register a user and return bearer auth headers"""
    response = client.post("/api/auth/register", json={
        "email": email,
        "username": username,
        "password": PASSWORD,
    })
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


def create_profile(client, headers, first_name="Asha", interests=None):
    response = client.post("/api/profile", headers=headers, json={
        "firstName": first_name,
        "lastName": "Rao",
        "contactNumber": "9876543210",
        "sex": "F",
        "dob": "1992-04-12",
        "currentCity": "Pune",
        "interests": interests if interests is not None else ["Music"],
    })
    assert response.status_code == 201, response.text
    return response.json()


def make_partner(client, email="host@example.com", username="host", first_name="Asha"):
    """Register a user with a business partner profile; returns auth headers"""
    headers = register(client, email=email, username=username)
    create_profile(client, headers, first_name=first_name)
    return headers


def event_payload(start_in=timedelta(days=3), duration=timedelta(hours=3), **overrides):
    start = datetime.utcnow() + start_in
    payload = {
        "name": "Launch Party",
        "description": "Product launch",
        "location": "Pune",
        "startDate": start.isoformat(),
        "endDate": (start + duration).isoformat(),
        "maxParticipants": 10,
        "price": 500,
        "currency": "INR",
    }
    payload.update(overrides)
    return payload


def create_event(client, headers, **kwargs):
    response = client.post("/api/events", headers=headers, json=event_payload(**kwargs))
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def host_headers(client):
    return make_partner(client)


@pytest.fixture
def guest_headers(client):
    return make_partner(client, email="guest@example.com", username="guest", first_name="Ravi")


def add_partner(store, name="Asha"):
    """Business partner straight into a store, bypassing HTTP"""
    return store.create_partner({
        "user_id": f"user-{name}",
        "first_name": name,
        "last_name": "Rao",
        "contact_number": "9876543210",
        "sex": "F",
        "dob": date(1992, 4, 12),
    }, [])


def add_event(store, partner, start, duration=timedelta(hours=2), **overrides):
    data = {
        "name": "Meetup",
        "description": None,
        "banner_image": None,
        "location": "Pune",
        "start_date": start,
        "end_date": start + duration,
        "max_participants": 10,
        "price": 100,
        "currency": "INR",
        "require_id_verification": False,
        "draft_mode": False,
        "offer_id": None,
    }
    data.update(overrides)
    return events.create_event(store, partner, data)
