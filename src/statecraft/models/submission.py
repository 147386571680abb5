"""Player policy submissions for a quarter."""

from typing import Any

from sqlalchemy import JSON, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class PlayerSubmission(Base, TimestampMixin):
    """Validated PolicyChoices for one player in one quarter.

    Resubmitting before the deadline replaces the stored policies.  Rows are
    deleted once the quarter is resolved.
    """

    __tablename__ = "player_submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    quarter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("quarters.id", ondelete="CASCADE"), nullable=False
    )
    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), nullable=False)
    player_id: Mapped[str] = mapped_column(String, nullable=False)
    policies: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        UniqueConstraint("quarter_id", "player_id", name="uq_player_submissions_player"),
        Index("idx_player_submissions_quarter", "quarter_id"),
    )
