"""Shared test fixtures: in-memory SQLite store, fake WhatsApp client, API client."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import renewal_desk.models  # noqa: F401
from renewal_desk.core.database import Base, get_db
from renewal_desk.main import app
from renewal_desk.services.store import PolicyStore
from renewal_desk.services.whatsapp import DispatchOutcome, get_whatsapp_client


class FakeWhatsAppClient:
    """Records every send. Phones in failing_phones get status "failed"."""

    def __init__(self, status="mock_sent", failing_phones=()):
        self.status = status
        self.failing_phones = set(failing_phones)
        self.templates = []
        self.texts = []

    def _outcome(self, phone):
        if phone in self.failing_phones:
            return DispatchOutcome(status="failed", error="provider rejected")
        return DispatchOutcome(status=self.status)

    def send_template(self, phone, name, params):
        self.templates.append((phone, name, list(params)))
        return self._outcome(phone)

    def send_text(self, phone, body):
        self.texts.append((phone, body))
        return self._outcome(phone)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return PolicyStore(db)


@pytest.fixture
def whatsapp():
    return FakeWhatsAppClient()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    from renewal_desk.core.config import settings

    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def client(db, whatsapp, upload_dir):
    """API client. Lifespan is not started; the test session and fake sender are injected."""

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_whatsapp_client] = lambda: whatsapp
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def add_policy(store, name, phone, policy_number, expiry_date, policy_type="General"):
    customer = store.get_or_create_customer(name, phone)
    return store.upsert_policy(customer.id, policy_number, policy_type, expiry_date)
