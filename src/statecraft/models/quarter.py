"""Quarter model: one turn of a game."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .game import Game


class Quarter(Base, TimestampMixin):
    """A quarter's deadline and resolution state.

    ``status`` moves active -> resolving -> completed.  The active -> resolving
    step is performed with a conditional UPDATE and is the only guard
    against resolving a quarter twice; ``resolving_started_at`` records when
    the claim was taken so stale claims can be reclaimed.

    Attributes:
        id: Primary key
        game_id: Foreign key to game
        quarter_number: 1-based quarter number within the game
        starts_at: When submissions opened
        ends_at: Submission deadline
        status: active/resolving/completed
        resolving_started_at: Time of the successful claim, if any
        completed_at: Time outcomes were stored
    """

    __tablename__ = "quarters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("games.id", ondelete="CASCADE"), nullable=False
    )
    quarter_number: Mapped[int] = mapped_column(Integer, nullable=False)

    starts_at: Mapped[datetime] = mapped_column(nullable=False)
    ends_at: Mapped[datetime] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    resolving_started_at: Mapped[datetime | None] = mapped_column(nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    game: Mapped["Game"] = relationship("Game", back_populates="quarters")

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'resolving', 'completed')",
            name="ck_quarters_status",
        ),
        UniqueConstraint("game_id", "quarter_number", name="uq_quarters_number"),
        Index("idx_quarters_status_ends_at", "status", "ends_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Quarter(id={self.id}, game_id={self.game_id}, number={self.quarter_number}, "
            f"status='{self.status}')>"
        )
