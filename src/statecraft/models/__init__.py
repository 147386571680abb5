"""SQLAlchemy models for Statecraft.

Exports every table and the declarative base used by Alembic.
"""

from .base import Base, TimestampCreatedMixin, TimestampMixin, utc_now

# Core game models
from .game import Game
from .job import ResolutionJob
from .player import GamePlayer
from .quarter import Quarter
from .results import QuarterResult, QuarterSnapshot
from .submission import PlayerSubmission

__all__ = [
    "Base",
    "Game",
    "GamePlayer",
    "PlayerSubmission",
    "Quarter",
    "QuarterResult",
    "QuarterSnapshot",
    "ResolutionJob",
    "TimestampCreatedMixin",
    "TimestampMixin",
    "utc_now",
]
