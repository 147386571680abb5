"""Durable queue of pending quarter resolutions."""

from datetime import datetime

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class ResolutionJob(Base, TimestampMixin):
    """A request to resolve a quarter, drained by the scheduler.

    Attributes:
        quarter_id: Quarter to resolve
        game_id: Owning game
        status: pending/running/done/failed
        attempts: Failed attempts so far
        last_error: Message of the most recent failure
        started_at: When a worker took the job; running jobs older than the
            reclaim timeout go back to pending
    """

    __tablename__ = "resolution_jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    quarter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("quarters.id", ondelete="CASCADE"), nullable=False
    )
    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'running', 'done', 'failed')",
            name="ck_resolution_jobs_status",
        ),
        Index("idx_resolution_jobs_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<ResolutionJob(id={self.id}, quarter_id={self.quarter_id}, "
            f"status='{self.status}', attempts={self.attempts})>"
        )
