"""Quarter resolution orchestration.

Resolving a quarter runs as:

1. claim the quarter (active -> resolving, committed on its own)
2. load submissions, falling back to the default policy for silent players
3. build resolution inputs for every active player
4. run the convergence driver
5. stage player outcomes, the quarter result and per-player snapshots
6. complete the quarter and delete its submissions
7. open the next quarter, or complete the game after the last one

Steps 2 to 7 are committed as one transaction.  If any of them fails the
staged writes are rolled back and the quarter is released back to active
so a later trigger can resolve it again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Executor
from dataclasses import dataclass
from datetime import datetime, timedelta

from statecraft.domain.defaults import DEFAULT_POLICIES
from statecraft.domain.equilibrium import resolve_quarter
from statecraft.domain.models import (
    GameID,
    QuarterID,
    ResolutionInput,
    ResolutionResult,
)
from statecraft.domain.rules_config import DEFAULT_RULES, RulesConfig
from statecraft.errors import ConflictError, NotFoundError
from statecraft.interfaces import IGameStore
from statecraft.models import utc_now
from statecraft.utils.rng import generate_seed

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QuarterResolution:
    """Summary of a successful resolution."""

    quarter_id: QuarterID
    game_id: GameID
    quarter_number: int
    result: ResolutionResult
    next_quarter_id: QuarterID | None
    game_completed: bool


class QuarterOrchestrator:
    """Resolve quarters exactly once against an :class:`IGameStore`."""

    def __init__(
        self,
        store: IGameStore,
        *,
        rules: RulesConfig = DEFAULT_RULES,
        clock: Callable[[], datetime] = utc_now,
        executor: Executor | None = None,
    ) -> None:
        self._store = store
        self._rules = rules
        self._clock = clock
        self._executor = executor

    def resolve(self, quarter_id: QuarterID, game_id: GameID | None = None) -> QuarterResolution:
        """Claim and resolve ``quarter_id``.

        Raises:
            NotFoundError: If the quarter or its game does not exist
            ConflictError: If another caller already claimed the quarter
        """
        quarter = self._store.get_quarter(quarter_id)
        if quarter is None or (game_id is not None and quarter.game_id != game_id):
            raise NotFoundError("quarter", quarter_id)
        game_id = quarter.game_id
        if self._store.load_game_with_players(game_id) is None:
            raise NotFoundError("game", game_id)

        if not self._store.claim_quarter_for_resolution(quarter_id):
            logger.info("Quarter %s already claimed; skipping", quarter_id)
            raise ConflictError(quarter_id)
        logger.info("Claimed quarter %s of game %s", quarter_id, game_id)

        try:
            resolution = self._resolve_claimed(quarter_id, game_id, quarter.quarter_number)
            self._store.commit()
        except Exception:
            self._store.rollback()
            self._store.release_quarter(quarter_id)
            logger.exception("Resolution of quarter %s failed; claim released", quarter_id)
            raise

        logger.info(
            "Resolved quarter %s of game %s (%d players, %d iterations)",
            quarter_id,
            game_id,
            len(resolution.result.outcomes),
            resolution.result.iterations,
        )
        return resolution

    def _resolve_claimed(
        self, quarter_id: QuarterID, game_id: GameID, quarter_number: int
    ) -> QuarterResolution:
        store = self._store
        submissions = store.load_submissions(quarter_id)
        loaded = store.load_game_with_players(game_id)
        if loaded is None:
            raise NotFoundError("game", game_id)
        game, players = loaded

        inputs = [
            ResolutionInput(
                player_id=player.player_id,
                resources=player.resources,
                policies=submissions.get(player.player_id, DEFAULT_POLICIES),
                starting_resources=player.starting_resources,
                quarters_played=game.current_quarter,
                seed=generate_seed(game.id, quarter_number, player.player_id, "events"),
            )
            for player in players
            if player.is_active
        ]
        missing = [item.player_id for item in inputs if item.player_id not in submissions]
        if missing:
            logger.info(
                "Quarter %s: %d player(s) use the default policy", quarter_id, len(missing)
            )

        result = resolve_quarter(
            inputs,
            game.scoring_weights,
            mode=game.resolution_mode,
            rules=self._rules,
            executor=self._executor,
        )

        now = self._clock()
        for player_id, outcome in result.outcomes.items():
            store.persist_player_outcome(
                game_id, player_id, round(outcome.score), outcome.resources
            )
        store.persist_quarter_result(quarter_id, game_id, result, now)
        store.persist_snapshots(quarter_id, game_id, result.snapshots)
        store.complete_quarter(quarter_id, now)
        store.delete_submissions(quarter_id)

        next_quarter_id: QuarterID | None = None
        if game.current_quarter < game.total_quarters:
            next_number = game.current_quarter + 1
            next_quarter_id = store.create_next_quarter(
                game_id,
                next_number,
                now,
                now + timedelta(seconds=game.quarter_duration_seconds),
            )
            store.advance_or_complete_game(game_id, next_number)
        else:
            store.advance_or_complete_game(game_id, None)

        return QuarterResolution(
            quarter_id=quarter_id,
            game_id=game_id,
            quarter_number=quarter_number,
            result=result,
            next_quarter_id=next_quarter_id,
            game_completed=next_quarter_id is None,
        )
