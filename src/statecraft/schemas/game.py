from pydantic import BaseModel, Field

from statecraft.domain.enums import ResolutionMode, ScoringPreset


class ScoringWeightsIn(BaseModel):
    gdp_growth: float = Field(..., ge=0.0, le=1.0)
    gdp_per_capita_growth: float = Field(..., ge=0.0, le=1.0)
    population_growth: float = Field(..., ge=0.0, le=1.0)
    stability_score: float = Field(..., ge=0.0, le=1.0)


class GameCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Display name for the game")
    total_quarters: int | None = Field(
        None, gt=0, description="Quarters until the game completes (settings default if unset)"
    )
    quarter_duration_seconds: int | None = Field(
        None, gt=0, description="Submission window per quarter (settings default if unset)"
    )
    max_players: int | None = Field(None, ge=1, description="Seat limit")
    scoring_preset: ScoringPreset = Field(default=ScoringPreset.BALANCED_GROWTH)
    scoring_weights: ScoringWeightsIn | None = Field(
        None, description="Explicit weights, only used with the custom preset"
    )
    resolution_mode: ResolutionMode = Field(default=ResolutionMode.LAGGED)
    player_name: str = Field(..., min_length=1, description="Creator's display name")
    player_emoji: str | None = None


class JoinGame(BaseModel):
    player_name: str = Field(..., min_length=1)
    player_emoji: str | None = None
