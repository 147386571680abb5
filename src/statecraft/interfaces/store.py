"""Game Store Protocol Interface.

This module defines the persistence operations the quarter orchestrator,
the game service and the scheduler depend on.  Writes other than the
quarter claim/release are staged until :meth:`IGameStore.commit`.
"""

from datetime import datetime
from typing import Protocol

from statecraft.domain.models import (
    GameID,
    GameRecord,
    JobRecord,
    PlayerID,
    PlayerRecord,
    PlayerResources,
    PlayerSnapshot,
    PolicyChoices,
    QuarterID,
    QuarterRecord,
    ResolutionResult,
)


class IGameStore(Protocol):
    """Protocol for game, quarter, submission and job persistence."""

    # --- quarter claim ---------------------------------------------------------

    def claim_quarter_for_resolution(self, quarter_id: QuarterID) -> bool:
        """Atomically move a quarter from active to resolving.

        The transition is committed immediately.

        Returns:
            True if this caller won the claim, False if the quarter was not active
        """
        ...

    def release_quarter(self, quarter_id: QuarterID) -> None:
        """Return a resolving quarter to active after a failed resolution."""
        ...

    def reclaim_stale_quarters(self, older_than: datetime) -> list[QuarterRecord]:
        """Release quarters stuck in resolving since before ``older_than``."""
        ...

    # --- reads -----------------------------------------------------------------

    def get_quarter(self, quarter_id: QuarterID) -> QuarterRecord | None: ...

    def get_active_quarter(self, game_id: GameID) -> QuarterRecord | None: ...

    def find_expired_quarters(self, now: datetime) -> list[QuarterRecord]:
        """Active quarters whose deadline is at or before ``now``."""
        ...

    def load_submissions(self, quarter_id: QuarterID) -> dict[PlayerID, PolicyChoices]: ...

    def load_game_with_players(
        self, game_id: GameID
    ) -> tuple[GameRecord, list[PlayerRecord]] | None: ...

    # --- resolution writes -----------------------------------------------------

    def persist_player_outcome(
        self, game_id: GameID, player_id: PlayerID, score: int, resources: PlayerResources
    ) -> None: ...

    def persist_quarter_result(
        self,
        quarter_id: QuarterID,
        game_id: GameID,
        result: ResolutionResult,
        resolved_at: datetime,
    ) -> None: ...

    def persist_snapshots(
        self, quarter_id: QuarterID, game_id: GameID, snapshots: list[PlayerSnapshot]
    ) -> None: ...

    def complete_quarter(self, quarter_id: QuarterID, completed_at: datetime) -> None: ...

    def delete_submissions(self, quarter_id: QuarterID) -> None: ...

    def create_next_quarter(
        self, game_id: GameID, number: int, starts_at: datetime, ends_at: datetime
    ) -> QuarterID: ...

    def advance_or_complete_game(self, game_id: GameID, next_quarter_number: int | None) -> None:
        """Set current_quarter to ``next_quarter_number``, or complete the game when None."""
        ...

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
    ) -> GameID: ...

    def add_player(
        self,
        game_id: GameID,
        player_id: PlayerID,
        player_name: str,
        resources: PlayerResources,
        player_emoji: str | None = None,
    ) -> None: ...

    def activate_game(self, game_id: GameID) -> None: ...

    def upsert_submission(
        self, quarter_id: QuarterID, game_id: GameID, player_id: PlayerID, policies: PolicyChoices
    ) -> None: ...

    # --- durable job queue -----------------------------------------------------

    def enqueue_resolution_job(self, quarter_id: QuarterID, game_id: GameID) -> tuple[int, bool]:
        """Queue a resolution unless the quarter already has a pending, running or failed job.

        Returns:
            (job id, True) for a new job, or (existing job id, False)
        """
        ...

    def requeue_quarter(self, quarter_id: QuarterID) -> int:
        """Give an active quarter a pending job, reviving its failed job if it has one."""
        ...

    def reclaim_stale_jobs(self, older_than: datetime) -> list[JobRecord]:
        """Return running jobs taken before ``older_than`` whose quarter is still active."""
        ...

    def claim_pending_jobs(self, limit: int, now: datetime | None = None) -> list[JobRecord]:
        """Mark up to ``limit`` pending jobs running, leased from ``now``, and return them."""
        ...

    def mark_job_done(self, job_id: int) -> None: ...

    def mark_job_failed(self, job_id: int, error: str, max_attempts: int) -> JobRecord:
        """Record a failure; the job returns to pending until attempts run out."""
        ...

    # --- transaction control ---------------------------------------------------

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...
