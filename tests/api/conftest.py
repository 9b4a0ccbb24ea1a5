from pathlib import Path
from typing import Generator
import pytest
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture
from sqlalchemy import Engine

from task_api.auth.users.postgres.store import PostgresUserStore
from task_api.common.current_datetime import get_current_datetime
from task_api.config import Settings, get_settings
from task_api.main import app
from tests.helpers import ALICE_ID, BOB_ID, JWT_SECRET


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        STORE_BACKEND="postgres",
        POSTGRES_URL=f"sqlite:///{tmp_path / 'test_api.db'}",
        JWT_SECRET=JWT_SECRET,
        CACHE_TTL=300,
        AUDIT_ENABLED=True,
        OTEL_ENABLED=False,
    )


@pytest.fixture
def client(
    test_settings: Settings, mocker: MockerFixture
) -> Generator[TestClient, None, None]:
    mocker.patch("task_api.main.settings", test_settings)
    app.dependency_overrides[get_settings] = lambda: test_settings

    with TestClient(app) as test_client:
        user_store = PostgresUserStore(test_client.app.state.db_engine)
        user_store.create_user(ALICE_ID, "alice", get_current_datetime())
        user_store.create_user(BOB_ID, "bob", get_current_datetime())
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def db_engine(client: TestClient) -> Engine:
    return client.app.state.db_engine
