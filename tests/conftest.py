"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from typing import Generator
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from layby_gateway.api.main import create_app
from layby_gateway.api.dependencies import get_payment_processor_client, get_today
from layby_gateway.infrastructure.clients.payment_processor import PaymentProcessorClient
from layby_gateway.infrastructure.database.models import Base
from layby_gateway.infrastructure.database.session import get_db

TODAY = date(2025, 1, 15)

# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def processor_client() -> MagicMock:
    """Payment processor client that records events instead of sending them"""
    client = MagicMock(spec=PaymentProcessorClient)
    client.send_booking_event = AsyncMock(return_value=None)
    return client


@pytest.fixture
def client(db: Session, today: date, processor_client: MagicMock) -> TestClient:
    """Create FastAPI test client with test database and a pinned calendar"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: today
    app.dependency_overrides[get_payment_processor_client] = lambda: processor_client
    return TestClient(app)
