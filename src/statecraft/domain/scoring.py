"""Scoring and ranking."""

from __future__ import annotations

from collections.abc import Iterable

from .enums import ScoringPreset
from .models import (
    PlayerOutcome,
    PlayerResources,
    PlayerSnapshot,
    ScoreBreakdown,
    ScoringWeights,
)
from .rules_config import DEFAULT_RULES, RulesConfig

SCORING_PRESETS: dict[ScoringPreset, ScoringWeights] = {
    ScoringPreset.BALANCED_GROWTH: ScoringWeights(0.3, 0.3, 0.2, 0.2),
    ScoringPreset.PURE_PROSPERITY: ScoringWeights(0.2, 0.5, 0.0, 0.3),
    ScoringPreset.POPULATION_POWER: ScoringWeights(0.3, 0.2, 0.4, 0.1),
    ScoringPreset.ECONOMIC_POWERHOUSE: ScoringWeights(0.6, 0.2, 0.0, 0.2),
    ScoringPreset.STABILITY_DOCTRINE: ScoringWeights(0.15, 0.25, 0.1, 0.5),
    ScoringPreset.CUSTOM: ScoringWeights(0.25, 0.25, 0.25, 0.25),
}


def weights_for_preset(preset: str) -> ScoringWeights:
    """Resolve a preset name, falling back to balanced growth."""

    try:
        return SCORING_PRESETS[ScoringPreset(preset)]
    except ValueError:
        return SCORING_PRESETS[ScoringPreset.BALANCED_GROWTH]


def calculate_stability_score(
    resources: PlayerResources, *, rules: RulesConfig = DEFAULT_RULES
) -> float:
    """100 minus penalties for inflation, debt and unemployment off target, in [0, 100]."""

    sc = rules.scoring
    inflation_penalty = abs(resources.inflation - rules.monetary.target_inflation) * (
        sc.stability_inflation_weight
    )
    debt_penalty = abs(resources.debt_to_gdp - sc.stability_debt_target) * sc.stability_debt_weight
    unemployment_penalty = (
        abs(resources.unemployment - sc.stability_unemployment_target)
        * sc.stability_unemployment_weight
    )
    raw = 100 - inflation_penalty - debt_penalty - unemployment_penalty
    return max(0.0, min(100.0, raw))


def _total_growth(current: float, starting: float) -> float:
    if starting <= 0:
        return 0.0
    return (current - starting) / starting


def _annualized_pct(total_growth: float, years: float) -> float:
    # A collapse below -100% has no real root; treat it as total loss.
    base = max(0.0, 1 + total_growth)
    return (base ** (1 / years) - 1) * 100


def calculate_score(
    current: PlayerResources,
    starting: PlayerResources,
    quarters_played: int,
    weights: ScoringWeights,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> ScoreBreakdown:
    """Score a player's trajectory from ``starting`` to ``current``.

    Growth components are annualised; population uses total growth; the
    stability component looks at the current quarter only.  Penalties are
    unweighted and the total has no floor.
    """

    if quarters_played <= 0:
        return ScoreBreakdown()

    sc = rules.scoring
    years_played = quarters_played / sc.quarters_per_year
    scale = sc.component_scale

    gdp_annual = _annualized_pct(_total_growth(current.gdp, starting.gdp), years_played)
    gdp_component = gdp_annual * sc.growth_multiplier * weights.gdp_growth * scale

    pc_annual = _annualized_pct(
        _total_growth(current.gdp_per_capita, starting.gdp_per_capita), years_played
    )
    pc_component = pc_annual * sc.growth_multiplier * weights.gdp_per_capita_growth * scale

    population_pct = _total_growth(current.population, starting.population) * 100
    population_component = (
        population_pct * sc.population_multiplier * weights.population_growth * scale
    )

    stability = calculate_stability_score(current, rules=rules)
    stability_component = stability * sc.stability_multiplier * weights.stability_score * scale

    penalties = 0.0
    if current.debt_to_gdp > sc.debt_crisis_threshold:
        penalties += sc.debt_crisis_penalty
    if current.inflation > sc.hyperinflation_threshold:
        penalties += sc.hyperinflation_penalty
    if current.gdp < current.potential_gdp * sc.depression_ratio:
        penalties += sc.depression_penalty

    total = gdp_component + pc_component + population_component + stability_component + penalties
    return ScoreBreakdown(
        gdp_growth_component=gdp_component,
        gdp_per_capita_component=pc_component,
        population_component=population_component,
        stability_component=stability_component,
        penalties=penalties,
        total=total,
    )


def rank_outcomes(outcomes: Iterable[PlayerOutcome]) -> list[PlayerSnapshot]:
    """Order outcomes by score (best first); ties break on player id."""

    ordered = sorted(outcomes, key=lambda outcome: (-outcome.score, str(outcome.player_id)))
    return [
        PlayerSnapshot(
            player_id=outcome.player_id,
            resources=outcome.resources,
            score=outcome.score,
            rank=index,
        )
        for index, outcome in enumerate(ordered, start=1)
    ]
