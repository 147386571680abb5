"""Game participant model."""

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .game import Game


class GamePlayer(Base, TimestampMixin):
    """A user's seat in one game.

    Attributes:
        id: Primary key
        game_id: Foreign key to game
        user_id: External identity of the user
        player_name: Display name
        player_emoji: Optional avatar glyph
        player_score: Rounded score after the latest resolved quarter
        player_resources: Current PlayerResources as JSON
        starting_resources: Resources at join time, the scoring baseline
        is_active: Whether the player is still resolved each quarter
    """

    __tablename__ = "game_players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("games.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String, nullable=False)

    player_name: Mapped[str] = mapped_column(String, nullable=False)
    player_emoji: Mapped[str | None] = mapped_column(String, nullable=True)
    player_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    player_resources: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    starting_resources: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    game: Mapped["Game"] = relationship("Game", back_populates="players")

    __table_args__ = (
        UniqueConstraint("game_id", "user_id", name="uq_game_players_user"),
        Index("idx_game_players_game", "game_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<GamePlayer(id={self.id}, game_id={self.game_id}, user_id='{self.user_id}', "
            f"score={self.player_score})>"
        )
