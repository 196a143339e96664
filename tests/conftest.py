"""
Shared fixtures: in-memory database, fresh OTP store and a recording SMS fake
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from phoneauth.auth.jwt_manager import JWTManager
from phoneauth.auth.otp_manager import OTPManager
from phoneauth.auth.otp_store import MemoryOTPStore
from phoneauth.core.database import Base, get_db
from phoneauth.core.exceptions import DeliveryError
from phoneauth.dependencies import get_jwt_manager, get_otp_manager, get_sms_service
from phoneauth.models import user  # noqa: F401

TEST_SECRET = "test-secret-key-not-for-production"


class FakeSMSService:
    """Records sent codes instead of calling a gateway"""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send_otp(self, phone_number, otp_code):
        if self.fail:
            raise DeliveryError(reason="api_error")
        self.sent.append((phone_number, otp_code))
        return {"success": True, "provider": "fake"}

    def last_code(self, phone_number):
        for phone, code in reversed(self.sent):
            if phone == phone_number:
                return code
        return None


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def otp_store():
    return MemoryOTPStore()


@pytest.fixture
def otp_manager(otp_store):
    return OTPManager(otp_store, otp_validity_minutes=10, verified_ttl_minutes=30)


@pytest.fixture
def jwt_manager():
    return JWTManager(secret_key=TEST_SECRET)


@pytest.fixture
def fake_sms():
    return FakeSMSService()


@pytest.fixture
def client(db_session, otp_manager, jwt_manager, fake_sms):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_otp_manager] = lambda: otp_manager
    app.dependency_overrides[get_jwt_manager] = lambda: jwt_manager
    app.dependency_overrides[get_sms_service] = lambda: fake_sms

    # lifespan is not entered, so no tables are created on the real database
    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()
