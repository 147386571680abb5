"""Value types flowing through the resolution engine.

All resolution types are frozen: the macro resolver never mutates its
inputs, it derives new values with :func:`dataclasses.replace`.  Persistence
adapters translate between these types and storage (see
:mod:`statecraft.repository`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import NewType

from .enums import (
    CapitalControls,
    GameEventType,
    GameStatus,
    ImmigrationPolicy,
    JobStatus,
    QEStance,
    QuarterStatus,
    ResolutionMode,
)

# --- Strongly typed identifiers -------------------------------------------------

GameID = NewType("GameID", int)
QuarterID = NewType("QuarterID", int)
PlayerID = NewType("PlayerID", str)


# --- Player state ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PlayerResources:
    """Economic state owned by one player between quarters.

    Percent-valued fields (inflation, interest_rate, debt_to_gdp,
    unemployment, tax_rate, trade_balance) are expressed in percentage
    points; ``money_supply_index`` has a baseline of 100.
    """

    gdp: float
    potential_gdp: float
    gdp_per_capita: float
    population: float
    inflation: float
    interest_rate: float
    debt_to_gdp: float
    exchange_rate: float
    unemployment: float
    education_index: float
    healthcare_index: float
    infrastructure_index: float
    tax_rate: float
    trade_balance: float = 0.0
    money_supply_index: float = 100.0
    quality_of_life: float = 0.0

    @property
    def output_gap(self) -> float:
        """Relative deviation of GDP from potential (0 when potential is degenerate)."""

        if self.potential_gdp <= 0:
            return 0.0
        return (self.gdp - self.potential_gdp) / self.potential_gdp


# --- Policy choices -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MinisterSlot:
    """Focus points and portfolio for one minister."""

    focus: int
    assignment: str


@dataclass(frozen=True, slots=True)
class CabinetAssignment:
    """Focus allocation across the four ministers."""

    warrior: MinisterSlot
    mage: MinisterSlot
    engineer: MinisterSlot
    diplomat: MinisterSlot

    @property
    def total_focus(self) -> int:
        return self.warrior.focus + self.mage.focus + self.engineer.focus + self.diplomat.focus


@dataclass(frozen=True, slots=True)
class PolicyChoices:
    """Everything a player submits for one quarter."""

    cabinet: CabinetAssignment
    interest_rate: float
    cbrf_autopilot: bool
    gov_spending_education: float
    gov_spending_healthcare: float
    gov_spending_infrastructure: float
    tax_rate: float
    tariff_rate: float
    immigration_policy: ImmigrationPolicy
    qe_stance: QEStance
    capital_controls: CapitalControls

    @property
    def total_gov_spending(self) -> float:
        """Total government spending in percent of GDP."""

        return (
            self.gov_spending_education
            + self.gov_spending_healthcare
            + self.gov_spending_infrastructure
        )


# --- Scoring --------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    gdp_growth: float
    gdp_per_capita_growth: float
    population_growth: float
    stability_score: float


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    gdp_growth_component: float = 0.0
    gdp_per_capita_component: float = 0.0
    population_component: float = 0.0
    stability_component: float = 0.0
    penalties: float = 0.0
    total: float = 0.0


# --- Interaction effects --------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CapitalFlowEffect:
    real_rate_diff: float
    flow_pressure: float
    exchange_rate_change: float
    gdp_effect: float


@dataclass(frozen=True, slots=True)
class NetExportsEffect:
    competitiveness: float
    net_exports: float
    trade_balance: float


@dataclass(frozen=True, slots=True)
class MigrationEffect:
    quality_of_life: float
    migration_pull: float
    net_migration_rate: float


@dataclass(frozen=True, slots=True)
class MoneySupplyEffect:
    money_growth: float
    money_supply_index: float
    supply_shock: float


@dataclass(frozen=True, slots=True)
class TwinDeficitEffect:
    risk_premium: float
    debt_spillover: float


@dataclass(frozen=True, slots=True)
class InteractionEffects:
    """Every cross-country effect applied to one player in one pass."""

    capital_flows: CapitalFlowEffect
    net_exports: NetExportsEffect
    migration: MigrationEffect
    money: MoneySupplyEffect
    twin_deficits: TwinDeficitEffect


# --- World aggregate ------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WorldState:
    """Cross-player aggregates for one resolution pass.

    ``players`` is the per-player view the aggregates were computed from;
    interaction models compare a player's entry here against the averages.
    """

    avg_interest_rate: float
    avg_inflation: float
    avg_exchange_rate: float
    avg_quality_of_life: float
    avg_tariff_rate: float
    total_gdp: float
    total_population: float
    player_count: int
    players: dict[PlayerID, PlayerResources] = field(default_factory=dict)


# --- Resolution input/output ----------------------------------------------------


@dataclass(frozen=True, slots=True)
class GameEvent:
    type: GameEventType
    title: str
    description: str
    impact: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ResolutionInput:
    """Everything the macro resolver needs for one player."""

    player_id: PlayerID
    resources: PlayerResources
    policies: PolicyChoices
    starting_resources: PlayerResources
    quarters_played: int
    seed: str = ""


@dataclass(frozen=True, slots=True)
class PlayerOutcome:
    player_id: PlayerID
    score: float
    resources: PlayerResources
    score_breakdown: ScoreBreakdown
    events: tuple[GameEvent, ...] = ()
    interactions: InteractionEffects | None = None


@dataclass(frozen=True, slots=True)
class PlayerSnapshot:
    """Charting row: resolved resources plus score and rank."""

    player_id: PlayerID
    resources: PlayerResources
    score: float
    rank: int


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Final outcomes of a quarter plus convergence diagnostics."""

    outcomes: dict[PlayerID, PlayerOutcome]
    snapshots: list[PlayerSnapshot]
    world_state: WorldState
    iterations: int
    converged: bool



# --- Persistent state views -----------------------------------------------------


@dataclass(frozen=True, slots=True)
class GameRecord:
    """Game row as seen by services."""

    id: GameID
    name: str
    status: GameStatus
    current_quarter: int
    total_quarters: int
    quarter_duration_seconds: int
    max_players: int
    scoring_weights: ScoringWeights
    resolution_mode: ResolutionMode
    created_by: str


@dataclass(frozen=True, slots=True)
class PlayerRecord:
    """A player's seat in a game with their current and starting resources."""

    player_id: PlayerID
    player_name: str
    resources: PlayerResources
    starting_resources: PlayerResources
    score: int = 0
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class QuarterRecord:
    id: QuarterID
    game_id: GameID
    quarter_number: int
    status: QuarterStatus
    starts_at: datetime
    ends_at: datetime


@dataclass(frozen=True, slots=True)
class JobRecord:
    """Pending quarter resolution taken from the durable queue."""

    id: int
    quarter_id: QuarterID
    game_id: GameID
    status: JobStatus
    attempts: int
    last_error: str | None = None
    started_at: datetime | None = None
