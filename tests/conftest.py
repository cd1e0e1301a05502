import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("SQL_ECHO", "false")
os.environ.setdefault("AUTO_CREATE_DB", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("EMAIL_BACKEND", "console")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import re
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.core.database import create_db_and_tables
from app.services.email_service import EmailDeliveryError


class RecordingMailer:
    """Mailer de prueba: guarda los emails en vez de enviarlos"""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, *, to_email, subject, html_body, text_body=None):
        self.sent.append(
            {"to_email": to_email, "subject": subject, "html_body": html_body, "text_body": text_body}
        )
        if self.fail:
            raise EmailDeliveryError("SMTP caído")

    def last_verification_token(self) -> str:
        match = re.search(r"verify-email\?token=(\S+)", self.sent[-1]["text_body"])
        assert match, "el último email no tiene link de verificación"
        return match.group(1)

    def last_reset_secret(self) -> str:
        match = re.search(r"reset-password/([0-9a-f]+)", self.sent[-1]["text_body"])
        assert match, "el último email no tiene link de reseteo"
        return match.group(1)


@pytest.fixture()
def engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture()
def db_session(engine):
    create_db_and_tables(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture()
def mailer():
    return RecordingMailer()


@pytest.fixture()
def api():
    from app.core.config import Settings
    from app.main import create_app

    return create_app(Settings())


@pytest.fixture()
def client(api, engine, db_session, mailer):
    from app.core.dependencies import get_mailer

    # Misma base en memoria que db_session
    api.state.engine = engine
    api.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(api) as test_client:
        yield test_client
    api.dependency_overrides.clear()
