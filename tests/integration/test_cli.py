"""Tests for the ``python -m statecraft`` entrypoint."""

import pytest

from statecraft import database
from statecraft.__main__ import build_parser, main
from statecraft.config import get_settings


@pytest.fixture
def temp_database(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setattr(database, "_engine", None)
    monkeypatch.setattr(database, "_SessionLocal", None)
    get_settings.cache_clear()
    yield
    if database._engine is not None:
        database._engine.dispose()
    get_settings.cache_clear()


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_run_interval_option():
    args = build_parser().parse_args(["run", "--interval", "2.5"])
    assert args.interval == 2.5


def test_init_db_then_sweep(temp_database, capsys):
    assert main(["init-db"]) == 0
    assert "games" in database.get_table_names()
    assert database.check_database_health() is True

    assert main(["sweep"]) == 0
    assert "queued=0" in capsys.readouterr().out


def test_requeue_takes_a_quarter_id():
    args = build_parser().parse_args(["requeue", "7"])
    assert args.quarter_id == 7


def test_requeue_unknown_quarter_fails(temp_database):
    assert main(["init-db"]) == 0
    assert main(["requeue", "4242"]) == 1
