"""SQLAlchemy-backed game store.

Domain values are stored as JSON columns and converted with pydantic
``TypeAdapter`` instances over the domain dataclasses.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from pydantic import TypeAdapter
from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from statecraft.domain import models as dm
from statecraft.domain.enums import GameStatus, JobStatus, QuarterStatus, ResolutionMode
from statecraft.domain.scoring import weights_for_preset
from statecraft.errors import ConflictError, NotFoundError
from statecraft.models import (
    Game,
    GamePlayer,
    PlayerSubmission,
    Quarter,
    QuarterResult,
    QuarterSnapshot,
    ResolutionJob,
    utc_now,
)

logger = logging.getLogger(__name__)

RESOURCES_ADAPTER: TypeAdapter[dm.PlayerResources] = TypeAdapter(dm.PlayerResources)
POLICIES_ADAPTER: TypeAdapter[dm.PolicyChoices] = TypeAdapter(dm.PolicyChoices)
WEIGHTS_ADAPTER: TypeAdapter[dm.ScoringWeights] = TypeAdapter(dm.ScoringWeights)
OUTCOME_ADAPTER: TypeAdapter[dm.PlayerOutcome] = TypeAdapter(dm.PlayerOutcome)
WORLD_ADAPTER: TypeAdapter[dm.WorldState] = TypeAdapter(dm.WorldState)

# A quarter with a job in one of these states is not queued again.
_BLOCKING_JOB_STATUSES = (JobStatus.PENDING, JobStatus.RUNNING, JobStatus.FAILED)


def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; every stored timestamp is UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def dump_resources(resources: dm.PlayerResources) -> dict[str, Any]:
    return RESOURCES_ADAPTER.dump_python(resources, mode="json")


def load_resources(data: dict[str, Any]) -> dm.PlayerResources:
    return RESOURCES_ADAPTER.validate_python(data)


def dump_policies(policies: dm.PolicyChoices) -> dict[str, Any]:
    return POLICIES_ADAPTER.dump_python(policies, mode="json")


def load_policies(data: dict[str, Any]) -> dm.PolicyChoices:
    return POLICIES_ADAPTER.validate_python(data)


def _quarter_record(row: Quarter) -> dm.QuarterRecord:
    return dm.QuarterRecord(
        id=dm.QuarterID(row.id),
        game_id=dm.GameID(row.game_id),
        quarter_number=row.quarter_number,
        status=QuarterStatus(row.status),
        starts_at=_as_utc(row.starts_at),
        ends_at=_as_utc(row.ends_at),
    )


def _job_record(row: ResolutionJob) -> dm.JobRecord:
    return dm.JobRecord(
        id=row.id,
        quarter_id=dm.QuarterID(row.quarter_id),
        game_id=dm.GameID(row.game_id),
        status=JobStatus(row.status),
        attempts=row.attempts,
        last_error=row.last_error,
        started_at=_as_utc(row.started_at) if row.started_at is not None else None,
    )


def _game_record(row: Game) -> dm.GameRecord:
    if row.scoring_weights:
        weights = WEIGHTS_ADAPTER.validate_python(row.scoring_weights)
    else:
        weights = weights_for_preset(row.scoring_preset)
    return dm.GameRecord(
        id=dm.GameID(row.id),
        name=row.name,
        status=GameStatus(row.status),
        current_quarter=row.current_quarter,
        total_quarters=row.total_quarters,
        quarter_duration_seconds=row.quarter_duration_seconds,
        max_players=row.max_players,
        scoring_weights=weights,
        resolution_mode=ResolutionMode(row.resolution_mode),
        created_by=row.created_by,
    )


def _player_record(row: GamePlayer) -> dm.PlayerRecord:
    return dm.PlayerRecord(
        player_id=dm.PlayerID(row.user_id),
        player_name=row.player_name,
        resources=load_resources(row.player_resources),
        starting_resources=load_resources(row.starting_resources),
        score=row.player_score,
        is_active=row.is_active,
    )


class SqlGameStore:
    """Game store operating on a single SQLAlchemy session.

    The quarter claim and release commit immediately; every other write is
    staged on the session until :meth:`commit`.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # --- quarter claim ---------------------------------------------------------

    def claim_quarter_for_resolution(self, quarter_id: dm.QuarterID) -> bool:
        stmt = (
            update(Quarter)
            .where(Quarter.id == quarter_id, Quarter.status == QuarterStatus.ACTIVE.value)
            .values(status=QuarterStatus.RESOLVING.value, resolving_started_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        claimed = result.rowcount == 1
        logger.debug("Claim of quarter %s: %s", quarter_id, "won" if claimed else "lost")
        return claimed

    def release_quarter(self, quarter_id: dm.QuarterID) -> None:
        self.session.execute(
            update(Quarter)
            .where(Quarter.id == quarter_id, Quarter.status == QuarterStatus.RESOLVING.value)
            .values(status=QuarterStatus.ACTIVE.value, resolving_started_at=None)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()

    def reclaim_stale_quarters(self, older_than: datetime) -> list[dm.QuarterRecord]:
        rows = self.session.scalars(
            select(Quarter).where(
                Quarter.status == QuarterStatus.RESOLVING.value,
                Quarter.resolving_started_at < older_than,
            )
        ).all()
        reclaimed: list[dm.QuarterRecord] = []
        for row in rows:
            result = self.session.execute(
                update(Quarter)
                .where(
                    Quarter.id == row.id,
                    Quarter.status == QuarterStatus.RESOLVING.value,
                    Quarter.resolving_started_at < older_than,
                )
                .values(status=QuarterStatus.ACTIVE.value, resolving_started_at=None)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                self.session.execute(
                    update(ResolutionJob)
                    .where(
                        ResolutionJob.quarter_id == row.id,
                        ResolutionJob.status == JobStatus.RUNNING.value,
                    )
                    .values(status=JobStatus.PENDING.value, started_at=None)
                    .execution_options(synchronize_session=False)
                )
                self.session.refresh(row)
                reclaimed.append(_quarter_record(row))
                logger.warning("Reclaimed stale resolving quarter %s", row.id)
        self.session.commit()
        return reclaimed

    # --- reads -----------------------------------------------------------------

    def get_quarter(self, quarter_id: dm.QuarterID) -> dm.QuarterRecord | None:
        row = self.session.get(Quarter, quarter_id)
        return _quarter_record(row) if row is not None else None

    def get_active_quarter(self, game_id: dm.GameID) -> dm.QuarterRecord | None:
        row = self.session.scalars(
            select(Quarter)
            .where(Quarter.game_id == game_id, Quarter.status == QuarterStatus.ACTIVE.value)
            .order_by(Quarter.quarter_number.desc())
        ).first()
        return _quarter_record(row) if row is not None else None

    def find_expired_quarters(self, now: datetime) -> list[dm.QuarterRecord]:
        rows = self.session.scalars(
            select(Quarter)
            .where(Quarter.status == QuarterStatus.ACTIVE.value, Quarter.ends_at <= now)
            .order_by(Quarter.id)
        ).all()
        return [_quarter_record(row) for row in rows]

    def load_submissions(self, quarter_id: dm.QuarterID) -> dict[dm.PlayerID, dm.PolicyChoices]:
        rows = self.session.scalars(
            select(PlayerSubmission).where(PlayerSubmission.quarter_id == quarter_id)
        ).all()
        return {dm.PlayerID(row.player_id): load_policies(row.policies) for row in rows}

    def load_game_with_players(
        self, game_id: dm.GameID
    ) -> tuple[dm.GameRecord, list[dm.PlayerRecord]] | None:
        game = self.session.get(Game, game_id)
        if game is None:
            return None
        return _game_record(game), [_player_record(row) for row in game.players]

    # --- resolution writes -----------------------------------------------------

    def persist_player_outcome(
        self,
        game_id: dm.GameID,
        player_id: dm.PlayerID,
        score: int,
        resources: dm.PlayerResources,
    ) -> None:
        self.session.execute(
            update(GamePlayer)
            .where(GamePlayer.game_id == game_id, GamePlayer.user_id == player_id)
            .values(player_score=score, player_resources=dump_resources(resources))
            .execution_options(synchronize_session=False)
        )

    def persist_quarter_result(
        self,
        quarter_id: dm.QuarterID,
        game_id: dm.GameID,
        result: dm.ResolutionResult,
        resolved_at: datetime,
    ) -> None:
        state = WORLD_ADAPTER.dump_python(result.world_state, mode="json")
        state["resolved_at"] = resolved_at.isoformat()
        self.session.add(
            QuarterResult(
                quarter_id=quarter_id,
                game_id=game_id,
                calculated_state=state,
                player_outcomes={
                    str(pid): OUTCOME_ADAPTER.dump_python(outcome, mode="json")
                    for pid, outcome in result.outcomes.items()
                },
                iterations=result.iterations,
                converged=result.converged,
            )
        )

    def persist_snapshots(
        self,
        quarter_id: dm.QuarterID,
        game_id: dm.GameID,
        snapshots: list[dm.PlayerSnapshot],
    ) -> None:
        for snapshot in snapshots:
            metrics = dump_resources(snapshot.resources)
            metrics["score"] = snapshot.score
            metrics["rank"] = snapshot.rank
            self.session.add(
                QuarterSnapshot(
                    quarter_id=quarter_id,
                    game_id=game_id,
                    player_id=snapshot.player_id,
                    metrics=metrics,
                    score=snapshot.score,
                    rank=snapshot.rank,
                )
            )

    def complete_quarter(self, quarter_id: dm.QuarterID, completed_at: datetime) -> None:
        self.session.execute(
            update(Quarter)
            .where(Quarter.id == quarter_id)
            .values(status=QuarterStatus.COMPLETED.value, completed_at=completed_at)
            .execution_options(synchronize_session=False)
        )

    def delete_submissions(self, quarter_id: dm.QuarterID) -> None:
        self.session.execute(
            delete(PlayerSubmission)
            .where(PlayerSubmission.quarter_id == quarter_id)
            .execution_options(synchronize_session=False)
        )

    def create_next_quarter(
        self, game_id: dm.GameID, number: int, starts_at: datetime, ends_at: datetime
    ) -> dm.QuarterID:
        quarter = Quarter(
            game_id=game_id,
            quarter_number=number,
            starts_at=starts_at,
            ends_at=ends_at,
            status=QuarterStatus.ACTIVE.value,
        )
        self.session.add(quarter)
        self.session.flush()
        return dm.QuarterID(quarter.id)

    def advance_or_complete_game(
        self, game_id: dm.GameID, next_quarter_number: int | None
    ) -> None:
        values: dict[str, Any]
        if next_quarter_number is None:
            values = {"status": GameStatus.COMPLETED.value}
        else:
            values = {"current_quarter": next_quarter_number}
        self.session.execute(
            update(Game)
            .where(Game.id == game_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    # --- lifecycle writes ------------------------------------------------------

    def create_game(
        self,
        *,
        name: str,
        created_by: str,
        total_quarters: int,
        quarter_duration_seconds: int,
        max_players: int,
        scoring_preset: str,
        scoring_weights: dict[str, float] | None,
        resolution_mode: str,
    ) -> dm.GameID:
        game = Game(
            name=name,
            created_by=created_by,
            status=GameStatus.WAITING.value,
            current_quarter=0,
            total_quarters=total_quarters,
            quarter_duration_seconds=quarter_duration_seconds,
            max_players=max_players,
            scoring_preset=scoring_preset,
            scoring_weights=scoring_weights,
            resolution_mode=resolution_mode,
        )
        self.session.add(game)
        self.session.flush()
        return dm.GameID(game.id)

    def add_player(
        self,
        game_id: dm.GameID,
        player_id: dm.PlayerID,
        player_name: str,
        resources: dm.PlayerResources,
        player_emoji: str | None = None,
    ) -> None:
        data = dump_resources(resources)
        self.session.add(
            GamePlayer(
                game_id=game_id,
                user_id=player_id,
                player_name=player_name,
                player_emoji=player_emoji,
                player_resources=data,
                starting_resources=dict(data),
            )
        )
        self.session.flush()

    def activate_game(self, game_id: dm.GameID) -> None:
        self.session.execute(
            update(Game)
            .where(Game.id == game_id)
            .values(status=GameStatus.ACTIVE.value, current_quarter=1)
            .execution_options(synchronize_session=False)
        )

    def upsert_submission(
        self,
        quarter_id: dm.QuarterID,
        game_id: dm.GameID,
        player_id: dm.PlayerID,
        policies: dm.PolicyChoices,
    ) -> None:
        existing = self.session.scalars(
            select(PlayerSubmission).where(
                PlayerSubmission.quarter_id == quarter_id,
                PlayerSubmission.player_id == player_id,
            )
        ).first()
        if existing is None:
            self.session.add(
                PlayerSubmission(
                    quarter_id=quarter_id,
                    game_id=game_id,
                    player_id=player_id,
                    policies=dump_policies(policies),
                )
            )
        else:
            existing.policies = dump_policies(policies)
        self.session.flush()

    # --- durable job queue -----------------------------------------------------

    def enqueue_resolution_job(
        self, quarter_id: dm.QuarterID, game_id: dm.GameID
    ) -> tuple[int, bool]:
        existing = self.session.scalars(
            select(ResolutionJob).where(
                ResolutionJob.quarter_id == quarter_id,
                ResolutionJob.status.in_([status.value for status in _BLOCKING_JOB_STATUSES]),
            )
        ).first()
        if existing is not None:
            return existing.id, False
        job = ResolutionJob(
            quarter_id=quarter_id, game_id=game_id, status=JobStatus.PENDING.value, attempts=0
        )
        self.session.add(job)
        self.session.flush()
        logger.info("Queued resolution job %s for quarter %s", job.id, quarter_id)
        return job.id, True

    def requeue_quarter(self, quarter_id: dm.QuarterID) -> int:
        """Give an active quarter a fresh pending job, reviving a failed one if present.

        Raises:
            NotFoundError: If the quarter does not exist
            ConflictError: If the quarter is no longer active
        """
        quarter = self.session.get(Quarter, quarter_id)
        if quarter is None:
            raise NotFoundError("quarter", quarter_id)
        if quarter.status != QuarterStatus.ACTIVE.value:
            raise ConflictError(quarter_id)

        failed = self.session.scalars(
            select(ResolutionJob).where(
                ResolutionJob.quarter_id == quarter_id,
                ResolutionJob.status == JobStatus.FAILED.value,
            )
        ).first()
        if failed is None:
            job_id, _ = self.enqueue_resolution_job(
                dm.QuarterID(quarter.id), dm.GameID(quarter.game_id)
            )
            return job_id

        failed.status = JobStatus.PENDING.value
        failed.attempts = 0
        failed.started_at = None
        self.session.flush()
        logger.warning(
            "Requeued failed job %s for quarter %s (last error: %s)",
            failed.id,
            quarter_id,
            failed.last_error,
        )
        return failed.id

    def reclaim_stale_jobs(self, older_than: datetime) -> list[dm.JobRecord]:
        """Return running jobs taken before ``older_than`` to the queue.

        A job whose quarter is still active goes back to pending. A job whose
        quarter already completed is marked done. Jobs of quarters still in
        resolving are left to :meth:`reclaim_stale_quarters`.
        """
        rows = self.session.execute(
            select(ResolutionJob, Quarter.status)
            .join(Quarter, Quarter.id == ResolutionJob.quarter_id)
            .where(
                ResolutionJob.status == JobStatus.RUNNING.value,
                ResolutionJob.started_at < older_than,
            )
            .order_by(ResolutionJob.id)
        ).all()
        requeued: list[dm.JobRecord] = []
        for job, quarter_status in rows:
            if quarter_status == QuarterStatus.ACTIVE.value:
                target = JobStatus.PENDING
            elif quarter_status == QuarterStatus.COMPLETED.value:
                target = JobStatus.DONE
            else:
                continue
            result = self.session.execute(
                update(ResolutionJob)
                .where(
                    ResolutionJob.id == job.id,
                    ResolutionJob.status == JobStatus.RUNNING.value,
                )
                .values(status=target.value, started_at=None)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1 and target == JobStatus.PENDING:
                self.session.refresh(job)
                requeued.append(_job_record(job))
                logger.warning(
                    "Returned stale job %s for quarter %s to the queue", job.id, job.quarter_id
                )
        self.session.commit()
        return requeued

    def claim_pending_jobs(
        self, limit: int, now: datetime | None = None
    ) -> list[dm.JobRecord]:
        started_at = now if now is not None else utc_now()
        rows = self.session.scalars(
            select(ResolutionJob)
            .where(ResolutionJob.status == JobStatus.PENDING.value)
            .order_by(ResolutionJob.id)
            .limit(limit)
        ).all()
        claimed: list[dm.JobRecord] = []
        for row in rows:
            result = self.session.execute(
                update(ResolutionJob)
                .where(
                    ResolutionJob.id == row.id,
                    ResolutionJob.status == JobStatus.PENDING.value,
                )
                .values(status=JobStatus.RUNNING.value, started_at=started_at)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                self.session.refresh(row)
                claimed.append(_job_record(row))
        return claimed

    def mark_job_done(self, job_id: int) -> None:
        self.session.execute(
            update(ResolutionJob)
            .where(ResolutionJob.id == job_id)
            .values(status=JobStatus.DONE.value, started_at=None)
            .execution_options(synchronize_session=False)
        )

    def mark_job_failed(self, job_id: int, error: str, max_attempts: int) -> dm.JobRecord:
        job = self.session.get(ResolutionJob, job_id)
        if job is None:
            raise NotFoundError("resolution job", job_id)
        job.attempts += 1
        job.last_error = error
        job.status = (
            JobStatus.FAILED.value if job.attempts >= max_attempts else JobStatus.PENDING.value
        )
        job.started_at = None
        self.session.flush()
        return _job_record(job)

    # --- transaction control ---------------------------------------------------

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def close(self) -> None:
        self.session.close()
