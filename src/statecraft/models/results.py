"""Resolution history: per-quarter results and per-player snapshots."""

from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampCreatedMixin


class QuarterResult(Base, TimestampCreatedMixin):
    """Aggregate WorldState and every player's outcome for a resolved quarter.

    Attributes:
        calculated_state: Final WorldState aggregates plus convergence info
        player_outcomes: Outcome (score, breakdown, resources, events) keyed by player
        iterations: Resolution passes run (1 in lagged mode)
        converged: Whether equilibrium mode met its tolerance
    """

    __tablename__ = "quarter_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    quarter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("quarters.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), nullable=False)
    calculated_state: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    player_outcomes: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    iterations: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    converged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class QuarterSnapshot(Base, TimestampCreatedMixin):
    """Charting row: one player's resources, score and rank after a quarter."""

    __tablename__ = "quarter_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    quarter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("quarters.id", ondelete="CASCADE"), nullable=False
    )
    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), nullable=False)
    player_id: Mapped[str] = mapped_column(String, nullable=False)
    metrics: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)
    rank: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("quarter_id", "player_id", name="uq_quarter_snapshots_player"),
        Index("idx_quarter_snapshots_game", "game_id"),
    )
