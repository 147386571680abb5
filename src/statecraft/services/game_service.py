"""Game lifecycle: create, join, start and submit.

Submitting is where the all-submit trigger lives: once every active player
has a submission for the current quarter, a resolution job is queued for
the scheduler instead of resolving inline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from statecraft.config import Settings, get_settings
from statecraft.domain.defaults import DEFAULT_PLAYER_RESOURCES
from statecraft.domain.enums import GameStatus, ScoringPreset
from statecraft.domain.models import (
    GameID,
    GameRecord,
    PlayerID,
    PlayerRecord,
    PolicyChoices,
    QuarterID,
)
from statecraft.domain.rules_config import DEFAULT_RULES, RulesConfig
from statecraft.domain.validation import ensure_valid_policies
from statecraft.errors import GameStateError, NotFoundError
from statecraft.interfaces import IGameStore
from statecraft.models import utc_now
from statecraft.schemas import GameCreate, JoinGame, parse_policy_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SubmissionReceipt:
    quarter_id: QuarterID
    all_submitted: bool
    job_id: int | None = None


class GameService:
    """Lifecycle operations that run outside quarter resolution."""

    def __init__(
        self,
        store: IGameStore,
        *,
        settings: Settings | None = None,
        rules: RulesConfig = DEFAULT_RULES,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._settings = settings or get_settings()
        self._rules = rules
        self._clock = clock

    def _load(self, game_id: GameID) -> tuple[GameRecord, list[PlayerRecord]]:
        loaded = self._store.load_game_with_players(game_id)
        if loaded is None:
            raise NotFoundError("game", game_id)
        return loaded

    def create_game(self, user_id: str, request: GameCreate) -> GameID:
        """Create a waiting game and seat its creator."""

        settings = self._settings
        weights = None
        if request.scoring_preset == ScoringPreset.CUSTOM and request.scoring_weights:
            weights = request.scoring_weights.model_dump()

        game_id = self._store.create_game(
            name=request.name,
            created_by=user_id,
            total_quarters=request.total_quarters or settings.default_total_quarters,
            quarter_duration_seconds=(
                request.quarter_duration_seconds or settings.default_quarter_duration_seconds
            ),
            max_players=request.max_players or settings.default_max_players,
            scoring_preset=request.scoring_preset.value,
            scoring_weights=weights,
            resolution_mode=request.resolution_mode.value,
        )
        self._store.add_player(
            game_id,
            PlayerID(user_id),
            request.player_name,
            DEFAULT_PLAYER_RESOURCES,
            request.player_emoji,
        )
        self._store.commit()
        logger.info("Game %s created by %s", game_id, user_id)
        return game_id

    def join_game(self, game_id: GameID, user_id: str, request: JoinGame) -> None:
        game, players = self._load(game_id)
        if game.status != GameStatus.WAITING:
            raise GameStateError("Game has already started")
        if any(player.player_id == user_id for player in players):
            raise GameStateError("Already joined this game")
        if len(players) >= game.max_players:
            raise GameStateError("Game is full")

        self._store.add_player(
            game_id,
            PlayerID(user_id),
            request.player_name,
            DEFAULT_PLAYER_RESOURCES,
            request.player_emoji,
        )
        self._store.commit()
        logger.info("Player %s joined game %s", user_id, game_id)

    def start_game(self, game_id: GameID, user_id: str) -> QuarterID:
        """Open quarter 1 and mark the game active."""

        game, players = self._load(game_id)
        if game.created_by != user_id:
            raise GameStateError("Only the game creator can start the game")
        if game.status != GameStatus.WAITING:
            raise GameStateError("Game has already started")
        minimum = self._settings.min_players_to_start
        if len(players) < minimum:
            raise GameStateError(f"Need at least {minimum} players to start")

        now = self._clock()
        quarter_id = self._store.create_next_quarter(
            game_id, 1, now, now + timedelta(seconds=game.quarter_duration_seconds)
        )
        self._store.activate_game(game_id)
        self._store.commit()
        logger.info("Game %s started with %d players", game_id, len(players))
        return quarter_id

    def submit_policies(
        self,
        game_id: GameID,
        user_id: str,
        policies: PolicyChoices | dict[str, Any],
    ) -> SubmissionReceipt:
        """Validate and record a player's policies for the active quarter.

        Raises:
            ValidationError: If the policies violate any bound; nothing is recorded
            GameStateError: If the game is not active or the user is not playing
        """
        game, players = self._load(game_id)
        if game.status != GameStatus.ACTIVE:
            raise GameStateError("Game is not active")
        active_ids = {player.player_id for player in players if player.is_active}
        if user_id not in active_ids:
            raise GameStateError("Not a player in this game")
        quarter = self._store.get_active_quarter(game_id)
        if quarter is None:
            raise GameStateError("No active quarter")

        if isinstance(policies, dict):
            policies = parse_policy_payload(policies)
        ensure_valid_policies(policies, rules=self._rules)

        self._store.upsert_submission(quarter.id, game_id, PlayerID(user_id), policies)
        submitted = set(self._store.load_submissions(quarter.id))
        all_submitted = active_ids <= submitted
        job_id = None
        if all_submitted:
            job_id, _ = self._store.enqueue_resolution_job(quarter.id, game_id)
        self._store.commit()

        if all_submitted:
            logger.info("All players submitted for quarter %s; job %s queued", quarter.id, job_id)
        return SubmissionReceipt(quarter_id=quarter.id, all_submitted=all_submitted, job_id=job_id)
