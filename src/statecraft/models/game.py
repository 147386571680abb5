"""Game model.

A game groups players, their quarters and the configuration that decides
how each quarter is resolved and scored.
"""

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .player import GamePlayer
    from .quarter import Quarter


class Game(Base, TimestampMixin):
    """One multiplayer economics game.

    Attributes:
        id: Primary key
        name: Display name
        status: Lifecycle state (waiting/active/completed)
        current_quarter: Number of the quarter being played (0 before start)
        total_quarters: Quarter count after which the game completes
        quarter_duration_seconds: Time players get to submit each quarter
        max_players: Seat limit while waiting
        scoring_preset: Name of the scoring weight preset
        scoring_weights: Explicit weights, overriding the preset when set
        resolution_mode: lagged or equilibrium
        created_by: User id of the creator (the only one who may start it)
    """

    __tablename__ = "games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="waiting")

    current_quarter: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_quarters: Mapped[int] = mapped_column(Integer, nullable=False, default=40)
    quarter_duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=300)
    max_players: Mapped[int] = mapped_column(Integer, nullable=False, default=10)

    scoring_preset: Mapped[str] = mapped_column(
        String, nullable=False, default="balanced_growth"
    )
    scoring_weights: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    resolution_mode: Mapped[str] = mapped_column(String, nullable=False, default="lagged")

    created_by: Mapped[str] = mapped_column(String, nullable=False)

    players: Mapped[list["GamePlayer"]] = relationship(
        "GamePlayer",
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="GamePlayer.id",
    )
    quarters: Mapped[list["Quarter"]] = relationship(
        "Quarter", back_populates="game", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('waiting', 'active', 'completed')",
            name="ck_games_status",
        ),
        CheckConstraint(
            "resolution_mode IN ('lagged', 'equilibrium')",
            name="ck_games_resolution_mode",
        ),
        CheckConstraint("current_quarter >= 0", name="ck_games_current_quarter"),
        CheckConstraint("total_quarters > 0", name="ck_games_total_quarters"),
    )

    def __repr__(self) -> str:
        return (
            f"<Game(id={self.id}, name='{self.name}', quarter={self.current_quarter}, "
            f"status='{self.status}')>"
        )
