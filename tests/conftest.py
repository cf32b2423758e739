"""
Root conftest.py - shared fixtures for all test layers.

Test Layers:
    - unit/      : pure functions, no I/O
    - component/ : pipeline, aggregate and store with mocked or in-memory dependencies
    - api/       : routers through the FastAPI test client
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lead_campaigns.context import CallerContext
from lead_campaigns.database import Base
from lead_campaigns.services.campaign_store import SqlCampaignStore

from factories import COMPANY_ID, OWNER_ID


@pytest.fixture
def owner_context() -> CallerContext:
    return CallerContext(user_id=OWNER_ID, company_id=COMPANY_ID)


@pytest.fixture
def member_context() -> CallerContext:
    return CallerContext(user_id="user-member", company_id=COMPANY_ID)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session) -> SqlCampaignStore:
    return SqlCampaignStore(db_session)


@pytest.fixture
def client(db_session):
    """Test client whose requests share the test database session."""
    from fastapi.testclient import TestClient

    from lead_campaigns.database import get_db
    from lead_campaigns.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def owner_headers():
    return {"X-User-Id": OWNER_ID, "X-Company-Id": COMPANY_ID}


@pytest.fixture
def member_headers():
    return {"X-User-Id": "user-member", "X-Company-Id": COMPANY_ID}
