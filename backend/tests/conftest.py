from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from app.config import Settings
from app.db import build_engine, create_db_and_tables
from app.main import create_app
from app.services.store import SQLAppointmentStore


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        business_timezone="UTC",
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def engine(settings):
    engine = build_engine(settings)
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    with Session(engine) as session:
        yield SQLAppointmentStore(session)


@pytest.fixture
def next_monday() -> date:
    # Always strictly after today so booking it never trips the past-time gate
    today = datetime.now(timezone.utc).date()
    return today + timedelta(days=7 - today.weekday())
