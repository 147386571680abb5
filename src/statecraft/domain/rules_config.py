"""Declarative rule configuration for the resolution engine.

Every formula constant lives here so the pure rule functions can be run
against an alternate ruleset (tests, balance experiments) without touching
module globals.
"""

from __future__ import annotations

from dataclasses import dataclass

from .enums import CapitalControls, ImmigrationPolicy, QEStance


@dataclass(frozen=True, slots=True)
class ResourceBounds:
    """Clamp ranges every resolved resource vector must respect."""

    population_floor: float = 1_000_000
    index_min: float = 0.0
    index_max: float = 100.0
    inflation_min: float = -5.0
    inflation_max: float = 50.0
    interest_rate_min: float = -1.0
    interest_rate_max: float = 20.0
    unemployment_min: float = 0.0
    unemployment_max: float = 25.0
    debt_floor: float = 0.0


@dataclass(frozen=True, slots=True)
class CabinetRules:
    """Focus budget and minister effect magnitudes."""

    total_focus_points: int = 10
    max_focus_per_minister: int = 4
    focus_effectiveness: tuple[float, ...] = (0.5, 0.75, 1.0, 1.3, 1.7)
    inflation_targeting_min_focus: int = 3
    inflation_targeting_step: float = 0.05
    engineer_index_gain: float = 0.5
    infrastructure_potential_gain: float = 0.001
    open_immigration_bonus: float = 0.025
    moderate_immigration_bonus: float = 0.01
    restrictive_immigration_bonus: float = 0.0

    def effectiveness(self, focus: int) -> float:
        """Effectiveness multiplier for a focus level, clamped into the table."""

        index = max(0, min(len(self.focus_effectiveness) - 1, int(focus)))
        return self.focus_effectiveness[index]

    def immigration_bonus(self, policy: ImmigrationPolicy) -> float:
        return {
            ImmigrationPolicy.OPEN: self.open_immigration_bonus,
            ImmigrationPolicy.MODERATE: self.moderate_immigration_bonus,
            ImmigrationPolicy.RESTRICTIVE: self.restrictive_immigration_bonus,
        }[policy]


@dataclass(frozen=True, slots=True)
class MonetaryRules:
    """Central Bank Reaction Function parameters."""

    neutral_real_rate: float = 2.0
    target_inflation: float = 2.0
    alpha: float = 1.5
    gamma: float = 0.5


@dataclass(frozen=True, slots=True)
class DemandRules:
    """IS curve parameters."""

    beta: float = 1.0
    gov_spending_multiplier: float = 0.3
    debt_risk_threshold: float = 100.0
    debt_risk_slope: float = 0.05


@dataclass(frozen=True, slots=True)
class PhillipsRules:
    """Phillips curve parameters."""

    slope: float = 0.3
    expectation_persistence: float = 0.7


@dataclass(frozen=True, slots=True)
class LabourRules:
    """Okun's law approximation."""

    natural_unemployment: float = 5.0


@dataclass(frozen=True, slots=True)
class CapitalFlowRules:
    """Uncovered interest parity flows and capital-control dampening."""

    open_dampening: float = 1.0
    moderate_dampening: float = 0.4
    strict_dampening: float = 0.1
    exchange_rate_sensitivity: float = 0.01
    gdp_sensitivity: float = 0.002

    def dampening(self, controls: CapitalControls) -> float:
        return {
            CapitalControls.OPEN: self.open_dampening,
            CapitalControls.MODERATE: self.moderate_dampening,
            CapitalControls.STRICT: self.strict_dampening,
        }[controls]


@dataclass(frozen=True, slots=True)
class TradeRules:
    """Net export coefficients."""

    competitiveness_weight: float = 0.5
    own_tariff_weight: float = 0.005
    world_tariff_weight: float = 0.003
    trade_balance_scale: float = 100.0


@dataclass(frozen=True, slots=True)
class MigrationRules:
    """Quality-of-life weights and migration gates."""

    gdp_per_capita_weight: float = 0.40
    healthcare_weight: float = 0.20
    education_weight: float = 0.15
    employment_weight: float = 0.15
    price_stability_weight: float = 0.10
    gdp_per_capita_low: float = 20_000.0
    gdp_per_capita_high: float = 80_000.0
    unemployment_ceiling: float = 25.0
    inflation_target: float = 2.0
    inflation_tolerance: float = 20.0
    sensitivity: float = 0.01
    restrictive_gate: float = 0.2
    moderate_gate: float = 0.6
    open_gate: float = 1.0

    def gate(self, policy: ImmigrationPolicy) -> float:
        return {
            ImmigrationPolicy.RESTRICTIVE: self.restrictive_gate,
            ImmigrationPolicy.MODERATE: self.moderate_gate,
            ImmigrationPolicy.OPEN: self.open_gate,
        }[policy]


@dataclass(frozen=True, slots=True)
class MoneyRules:
    """Quantitative easing / money supply parameters."""

    tightening_growth: float = -0.02
    neutral_growth: float = 0.0
    easing_growth: float = 0.03
    supply_shock_passthrough: float = 0.5
    baseline_index: float = 100.0

    def growth(self, stance: QEStance) -> float:
        return {
            QEStance.TIGHTENING: self.tightening_growth,
            QEStance.NEUTRAL: self.neutral_growth,
            QEStance.EASING: self.easing_growth,
        }[stance]


@dataclass(frozen=True, slots=True)
class TwinDeficitRules:
    """Trade deficit spillovers into risk premium and debt."""

    trade_deficit_threshold: float = -3.0
    premium_slope: float = 0.02
    debt_spillover: float = 0.1


@dataclass(frozen=True, slots=True)
class PopulationRules:
    """Natural population dynamics."""

    birth_rate: float = 0.01
    base_death_rate: float = 0.008
    min_death_rate: float = 0.002
    healthcare_divisor: float = 10_000.0


@dataclass(frozen=True, slots=True)
class EventRules:
    """Random event odds and crisis thresholds."""

    random_event_probability: float = 0.01
    event_dice: str = "1d100"
    debt_crisis_threshold: float = 150.0
    hyperinflation_threshold: float = 20.0


@dataclass(frozen=True, slots=True)
class ScoringRules:
    """Scoring multipliers and penalties."""

    quarters_per_year: int = 4
    growth_multiplier: float = 3.0
    population_multiplier: float = 0.2
    stability_multiplier: float = 0.2
    component_scale: float = 100.0
    stability_inflation_weight: float = 10.0
    stability_debt_target: float = 60.0
    stability_debt_weight: float = 0.5
    stability_unemployment_target: float = 5.0
    stability_unemployment_weight: float = 10.0
    debt_crisis_threshold: float = 150.0
    debt_crisis_penalty: float = -50.0
    hyperinflation_threshold: float = 20.0
    hyperinflation_penalty: float = -100.0
    depression_ratio: float = 0.9
    depression_penalty: float = -10.0


@dataclass(frozen=True, slots=True)
class EquilibriumRules:
    """Iteration cap and tolerance for equilibrium mode."""

    max_iterations: int = 5
    tolerance: float = 0.001


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    bounds: ResourceBounds = ResourceBounds()
    cabinet: CabinetRules = CabinetRules()
    monetary: MonetaryRules = MonetaryRules()
    demand: DemandRules = DemandRules()
    phillips: PhillipsRules = PhillipsRules()
    labour: LabourRules = LabourRules()
    capital_flows: CapitalFlowRules = CapitalFlowRules()
    trade: TradeRules = TradeRules()
    migration: MigrationRules = MigrationRules()
    money: MoneyRules = MoneyRules()
    twin_deficits: TwinDeficitRules = TwinDeficitRules()
    population: PopulationRules = PopulationRules()
    events: EventRules = EventRules()
    scoring: ScoringRules = ScoringRules()
    equilibrium: EquilibriumRules = EquilibriumRules()


DEFAULT_RULES = RulesConfig()
