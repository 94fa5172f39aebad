import os

os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, insert
from sqlalchemy.orm import Session

from app.config import get_settings
from app.constants.event_types import EVENT_TYPE_SEED
from app.db import Base, get_db
from app.models.event_type import EventTypeRecord
from app.services.event_type_service import reset_event_classifier

pytest_plugins = [
    "tests.fixtures.message_detail_fixtures",
    "tests.fixtures.event_fixtures",
    "tests.fixtures.conversation_status_fixtures",
]


@pytest.fixture(scope="session")
def engine():
    """Fresh schema on TEST_DATABASE_URL, with the event type reference rows."""
    engine = create_engine(get_settings().database_url)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(
            insert(EventTypeRecord),
            [
                {
                    "event_type_id": int(event_type),
                    "description": description,
                    "status": status,
                }
                for event_type, (description, status) in EVENT_TYPE_SEED.items()
            ],
        )
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine):
    """
    Session bound to an outer transaction that is rolled back after the test.

    Service commits only release savepoints, so tests stay isolated.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        join_transaction_mode="create_savepoint",
        autoflush=False,
        expire_on_commit=False,
    )
    reset_event_classifier()
    yield session
    session.close()
    transaction.rollback()
    connection.close()
    reset_event_classifier()


@pytest.fixture
def client(db):
    from app.main import create_app

    app = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
