"""End-to-end quarter resolution: lifecycle service, orchestrator and scheduler on SQLite."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import func, select

from statecraft.domain.defaults import DEFAULT_PLAYER_RESOURCES, DEFAULT_POLICIES
from statecraft.domain.enums import GameStatus, JobStatus, QuarterStatus
from statecraft.domain.rules_config import EventRules, RulesConfig
from statecraft.errors import ConflictError, NotFoundError
from statecraft.models import (
    Game,
    GamePlayer,
    PlayerSubmission,
    Quarter,
    QuarterResult,
    QuarterSnapshot,
    ResolutionJob,
)
from statecraft.repository import SqlGameStore, load_resources
from statecraft.schemas import GameCreate, JoinGame
from statecraft.services import GameService, QuarterOrchestrator, ResolutionScheduler

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
QUIET = RulesConfig(events=EventRules(random_event_probability=0.0))


class ExplodingStore(SqlGameStore):
    """Fails after outcomes have been staged."""

    def persist_snapshots(self, quarter_id, game_id, snapshots):
        raise RuntimeError("disk full")


@pytest.fixture
def games(store, settings):
    return GameService(store, settings=settings, rules=QUIET, clock=lambda: NOW)


@pytest.fixture
def started(games):
    """Game with two seated players and quarter 1 open."""
    game_id = games.create_game(
        "alice", GameCreate(name="League", player_name="Alice", total_quarters=2)
    )
    games.join_game(game_id, "bob", JoinGame(player_name="Bob"))
    quarter_id = games.start_game(game_id, "alice")
    return game_id, quarter_id


def _scheduler(session_factory, settings, store_class=SqlGameStore, clock=lambda: NOW):
    return ResolutionScheduler(
        lambda: store_class(session_factory()), settings=settings, rules=QUIET, clock=clock
    )


def _count(session, model, **filters):
    stmt = select(func.count()).select_from(model)
    for name, value in filters.items():
        stmt = stmt.where(getattr(model, name) == value)
    return session.scalar(stmt)


class TestOrchestrator:
    def test_resolves_quarter_and_opens_next(self, started, session_factory):
        game_id, quarter_id = started
        with session_factory() as session:
            resolution = QuarterOrchestrator(
                SqlGameStore(session), rules=QUIET, clock=lambda: NOW
            ).resolve(quarter_id)

        assert resolution.quarter_number == 1
        assert resolution.game_completed is False
        assert set(resolution.result.outcomes) == {"alice", "bob"}

        with session_factory() as session:
            assert session.get(Quarter, quarter_id).status == QuarterStatus.COMPLETED.value
            next_quarter = session.get(Quarter, resolution.next_quarter_id)
            assert next_quarter.quarter_number == 2
            assert next_quarter.status == QuarterStatus.ACTIVE.value
            assert session.get(Game, game_id).current_quarter == 2
            assert _count(session, QuarterResult, quarter_id=quarter_id) == 1
            stored = session.scalars(
                select(QuarterResult).where(QuarterResult.quarter_id == quarter_id)
            ).one()
            assert stored.calculated_state["resolved_at"] == NOW.isoformat()
            assert _count(session, QuarterSnapshot, quarter_id=quarter_id) == 2

            players = session.scalars(select(GamePlayer).where(GamePlayer.game_id == game_id))
            for player in players:
                assert load_resources(player.player_resources) != DEFAULT_PLAYER_RESOURCES
                assert load_resources(player.starting_resources) == DEFAULT_PLAYER_RESOURCES

    def test_silent_players_use_default_policy(self, started, games, session_factory):
        game_id, quarter_id = started
        games.submit_policies(game_id, "alice", DEFAULT_POLICIES)

        with session_factory() as session:
            QuarterOrchestrator(SqlGameStore(session), rules=QUIET).resolve(quarter_id)

        with session_factory() as session:
            # Identical policies and starting points give identical outcomes.
            snapshots = session.scalars(
                select(QuarterSnapshot).where(QuarterSnapshot.quarter_id == quarter_id)
            ).all()
            assert snapshots[0].score == pytest.approx(snapshots[1].score)
            assert _count(session, PlayerSubmission, quarter_id=quarter_id) == 0

    def test_last_quarter_completes_game(self, started, session_factory):
        game_id, quarter_id = started
        with session_factory() as session:
            first = QuarterOrchestrator(SqlGameStore(session), rules=QUIET).resolve(quarter_id)
        with session_factory() as session:
            last = QuarterOrchestrator(SqlGameStore(session), rules=QUIET).resolve(
                first.next_quarter_id
            )

        assert last.game_completed is True
        assert last.next_quarter_id is None
        with session_factory() as session:
            assert session.get(Game, game_id).status == GameStatus.COMPLETED.value
            assert _count(session, Quarter, game_id=game_id) == 2

    def test_second_resolve_conflicts(self, started, session_factory):
        _, quarter_id = started
        with session_factory() as session:
            QuarterOrchestrator(SqlGameStore(session), rules=QUIET).resolve(quarter_id)
        with session_factory() as session:
            with pytest.raises(ConflictError):
                QuarterOrchestrator(SqlGameStore(session), rules=QUIET).resolve(quarter_id)

    def test_unknown_quarter(self, session_factory):
        with session_factory() as session:
            with pytest.raises(NotFoundError):
                QuarterOrchestrator(SqlGameStore(session)).resolve(4242)

    def test_failure_rolls_back_and_releases_claim(self, started, session_factory):
        game_id, quarter_id = started
        with session_factory() as session:
            orchestrator = QuarterOrchestrator(ExplodingStore(session), rules=QUIET)
            with pytest.raises(RuntimeError, match="disk full"):
                orchestrator.resolve(quarter_id)

        with session_factory() as session:
            quarter = session.get(Quarter, quarter_id)
            assert quarter.status == QuarterStatus.ACTIVE.value
            assert quarter.resolving_started_at is None
            assert session.get(Game, game_id).current_quarter == 1
            assert _count(session, QuarterResult) == 0
            assert _count(session, Quarter, game_id=game_id) == 1
            players = session.scalars(select(GamePlayer).where(GamePlayer.game_id == game_id))
            for player in players:
                assert player.player_score == 0
                assert load_resources(player.player_resources) == DEFAULT_PLAYER_RESOURCES

        # The released quarter resolves normally afterwards.
        with session_factory() as session:
            QuarterOrchestrator(SqlGameStore(session), rules=QUIET).resolve(quarter_id)


class TestScheduler:
    def test_all_submitted_job_is_drained(self, started, games, settings, session_factory):
        game_id, quarter_id = started
        games.submit_policies(game_id, "alice", DEFAULT_POLICIES)
        receipt = games.submit_policies(game_id, "bob", DEFAULT_POLICIES)
        assert receipt.all_submitted is True

        report = _scheduler(session_factory, settings).drain_jobs_sync()

        assert report.resolved == [quarter_id]
        with session_factory() as session:
            job = session.get(ResolutionJob, receipt.job_id)
            assert job.status == JobStatus.DONE.value
            assert session.get(Quarter, quarter_id).status == QuarterStatus.COMPLETED.value

    def test_sweep_queues_expired_quarters(self, started, settings, session_factory):
        _, quarter_id = started
        early = _scheduler(session_factory, settings).sweep_sync()
        assert early.queued == []

        late = _scheduler(
            session_factory, settings, clock=lambda: NOW + timedelta(minutes=2)
        ).sweep_sync()
        assert late.queued == [quarter_id]
        assert late.resolved == [quarter_id]

    def test_already_resolved_quarter_counts_as_conflict(
        self, started, settings, session_factory
    ):
        game_id, quarter_id = started
        with session_factory() as session:
            store = SqlGameStore(session)
            store.enqueue_resolution_job(quarter_id, game_id)
            store.commit()
            QuarterOrchestrator(store, rules=QUIET).resolve(quarter_id)

        report = _scheduler(session_factory, settings).drain_jobs_sync()
        assert report.conflicts == [quarter_id]
        with session_factory() as session:
            assert _count(session, ResolutionJob, status=JobStatus.DONE.value) == 1

    def test_failed_job_retries_then_gives_up(self, started, settings, session_factory):
        game_id, quarter_id = started
        with session_factory() as session:
            store = SqlGameStore(session)
            job_id, _ = store.enqueue_resolution_job(quarter_id, game_id)
            store.commit()

        scheduler = _scheduler(session_factory, settings, store_class=ExplodingStore)
        assert scheduler.drain_jobs_sync().failed == [quarter_id]
        assert scheduler.drain_jobs_sync().failed == [quarter_id]
        assert scheduler.drain_jobs_sync().failed == []

        with session_factory() as session:
            job = session.get(ResolutionJob, job_id)
            assert job.status == JobStatus.FAILED.value
            assert job.attempts == settings.job_max_attempts
            assert job.last_error == "disk full"
            assert session.get(Quarter, quarter_id).status == QuarterStatus.ACTIVE.value

    def test_sweep_reports_each_quarter_queued_once(self, started, settings, session_factory):
        game_id, quarter_id = started
        with session_factory() as session:
            store = SqlGameStore(session)
            job_id, _ = store.enqueue_resolution_job(quarter_id, game_id)
            store.mark_job_failed(job_id, "disk full", max_attempts=1)
            store.commit()

        late = _scheduler(session_factory, settings, clock=lambda: NOW + timedelta(minutes=2))
        report = late.sweep_sync()
        assert report.queued == []
        assert report.resolved == []

    def test_worker_crash_after_taking_job_is_recovered(
        self, started, settings, session_factory
    ):
        game_id, quarter_id = started
        deadline = NOW + timedelta(seconds=60)
        with session_factory() as session:
            store = SqlGameStore(session)
            store.enqueue_resolution_job(quarter_id, game_id)
            store.commit()
            # Job taken at the deadline; the worker dies before claiming the quarter.
            store.claim_pending_jobs(5, deadline)
            store.commit()

        inside_lease = _scheduler(
            session_factory, settings, clock=lambda: deadline + timedelta(minutes=5)
        ).sweep_sync()
        assert inside_lease.requeued == []
        assert inside_lease.resolved == []

        after_lease = _scheduler(
            session_factory, settings, clock=lambda: deadline + timedelta(hours=5)
        ).sweep_sync()
        assert after_lease.requeued == [quarter_id]
        assert after_lease.queued == []
        assert after_lease.resolved == [quarter_id]
        with session_factory() as session:
            assert session.get(Quarter, quarter_id).status == QuarterStatus.COMPLETED.value
            assert _count(session, ResolutionJob, status=JobStatus.DONE.value) == 1

    def test_failed_job_is_resolved_after_requeue(self, started, settings, session_factory):
        game_id, quarter_id = started
        with session_factory() as session:
            store = SqlGameStore(session)
            store.enqueue_resolution_job(quarter_id, game_id)
            store.commit()

        broken = _scheduler(session_factory, settings, store_class=ExplodingStore)
        broken.drain_jobs_sync()
        broken.drain_jobs_sync()

        healthy = _scheduler(session_factory, settings)
        assert healthy.drain_jobs_sync().resolved == []
        job_id = healthy.requeue_sync(quarter_id)

        assert healthy.drain_jobs_sync().resolved == [quarter_id]
        with session_factory() as session:
            job = session.get(ResolutionJob, job_id)
            assert job.status == JobStatus.DONE.value
            assert _count(session, ResolutionJob, quarter_id=quarter_id) == 1

    @pytest.mark.asyncio
    async def test_run_once(self, started, settings, session_factory):
        _, quarter_id = started
        scheduler = _scheduler(
            session_factory, settings, clock=lambda: NOW + timedelta(minutes=2)
        )
        report = await scheduler.run_once()
        assert report.resolved == [quarter_id]

    @pytest.mark.asyncio
    async def test_background_loop_resolves_and_stops(self, started, settings, session_factory):
        _, quarter_id = started
        scheduler = _scheduler(
            session_factory, settings, clock=lambda: NOW + timedelta(minutes=2)
        )
        scheduler.set_interval(0.1)
        scheduler.start()
        assert scheduler.is_running

        status = None
        for _ in range(100):
            await asyncio.sleep(0.05)
            with session_factory() as session:
                status = session.get(Quarter, quarter_id).status
            if status == QuarterStatus.COMPLETED.value:
                break

        await scheduler.stop()
        assert status == QuarterStatus.COMPLETED.value
        assert not scheduler.is_running

    def test_interval_has_a_floor(self, settings, session_factory):
        scheduler = _scheduler(session_factory, settings)
        scheduler.set_interval(0.0)
        assert scheduler.interval_seconds == ResolutionScheduler.MIN_INTERVAL_SECONDS
