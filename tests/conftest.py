from datetime import datetime, timezone
from pathlib import Path
from typing import Generator
import pytest
from sqlalchemy import Engine

from task_api.auth.schemas import Claims
from task_api.common.database import create_db_engine, init_database
from tests.helpers import FakeClock


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'test_task_api.db'}")
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def claims() -> Claims:
    return Claims(
        sub="user-1",
        username="alice",
        exp=datetime(2030, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def other_claims() -> Claims:
    return Claims(
        sub="user-2",
        username="bob",
        exp=datetime(2030, 1, 1, tzinfo=timezone.utc),
    )
