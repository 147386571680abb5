"""Pytest configuration to ensure the `src` package layout is importable.

This adds the `src/` directory to `sys.path` so tests can import the
`statecraft` package without requiring an editable install in CI, and
provides shared builders for resources, policies and a throwaway SQLite
database.
"""

import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from sqlalchemy.orm import sessionmaker  # noqa: E402

from statecraft.config import Settings  # noqa: E402
from statecraft.database import create_db_engine, init_db  # noqa: E402
from statecraft.domain.defaults import DEFAULT_PLAYER_RESOURCES, DEFAULT_POLICIES  # noqa: E402
from statecraft.domain.rules_config import EventRules, RulesConfig  # noqa: E402
from statecraft.repository import SqlGameStore  # noqa: E402


@pytest.fixture
def resources():
    return DEFAULT_PLAYER_RESOURCES


@pytest.fixture
def policies():
    return DEFAULT_POLICIES


@pytest.fixture
def quiet_rules():
    """Rules with random events switched off."""
    return RulesConfig(events=EventRules(random_event_probability=0.0))


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        min_players_to_start=2,
        default_total_quarters=3,
        default_quarter_duration_seconds=60,
        job_max_attempts=2,
    )


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite database with every table created."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'statecraft.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def store(session_factory):
    store = SqlGameStore(session_factory())
    yield store
    store.close()
