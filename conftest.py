import os
import re

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///./foodbridge_test_unused.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("CLEANUP_ENABLED", "false")
os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from foodbridge.api.deps import get_email_service
from foodbridge.core.database import get_db, init_db
from foodbridge.core.security import create_access_token, get_password_hash
from foodbridge.main import app
from foodbridge.models.roster import Donor, Receiver
from foodbridge.services.email_service import EmailService

ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key"}
PASSWORD = "Secret123"


class RecordingEmailService(EmailService):
    """Collects outgoing mail instead of talking to an SMTP server"""

    def __init__(self):
        super().__init__(smtp_server="smtp.test", smtp_port=587, from_email="noreply@test", admin_email="admin@test")
        self.sent = []
        self.fail = False

    def send_email(self, to_email, subject, body, html_body=None, reply_to=None):
        if self.fail:
            return False
        self.sent.append({"to": to_email, "subject": subject, "body": body})
        return True

    def last_code_for(self, email):
        for message in reversed(self.sent):
            if message["to"] == email:
                match = re.search(r"\b(\d{6})\b", message["body"])
                if match:
                    return match.group(1)
        return None


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'foodbridge.db'}",
        connect_args={"check_same_thread": False, "timeout": 15},
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def outbox():
    return RecordingEmailService()


@pytest.fixture
def client(session_factory, outbox):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: outbox
    yield TestClient(app)
    app.dependency_overrides.clear()


def _roster_account(model, db, email, name):
    account = model(
        organization_name=name,
        organization_type="NGO" if model is Receiver else "Restaurant",
        phone=f"98{abs(hash(email)) % 10 ** 8:08d}",
        address="12 Market Street",
        email=email,
        password_hash=get_password_hash(PASSWORD),
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


@pytest.fixture
def make_donor(db):
    def factory(email="donor@example.com", name="Green Kitchen"):
        return _roster_account(Donor, db, email, name)
    return factory


@pytest.fixture
def make_receiver(db):
    def factory(email="receiver@example.com", name="Food For All"):
        return _roster_account(Receiver, db, email, name)
    return factory


def auth_headers(email, role):
    token = create_access_token(subject=email, role=role)
    return {"Authorization": f"Bearer {token}"}
