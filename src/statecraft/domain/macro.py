"""Per-player macro resolution.

:func:`resolve_player` advances one economy by one quarter.  The steps run
in a fixed order and later steps read what earlier ones produced:

1. cabinet effects
2. money supply and QE supply shock
3. interest rate (CBRF autopilot or manual)
4. capital flows
5. net exports
6. IS curve
7. Phillips curve
8. migration
9. population
10. GDP per capita
11. budget identity
12. exchange rate
13. unemployment (Okun)
14. carry trade balance, money supply, quality of life and tax rate
15. random events
16. bounds clamp and crisis detection
17. score

Interaction models compare the player's entry in ``world.players`` against
the world averages, so with a single player every differential is zero.
Tariffs are the exception: own and world tariffs carry different weights.
"""

from __future__ import annotations

import math
from dataclasses import replace

from .cabinet import apply_cabinet_effects
from .events import apply_random_events, detect_crises
from .interactions import (
    capital_flows,
    migration,
    money_supply,
    net_exports,
    twin_deficits,
)
from .models import (
    InteractionEffects,
    PlayerOutcome,
    PlayerResources,
    PolicyChoices,
    ResolutionInput,
    ScoringWeights,
    WorldState,
)
from .rules_config import DEFAULT_RULES, RulesConfig
from .scoring import calculate_score


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def central_bank_rate(
    resources: PlayerResources,
    effectiveness: float = 1.0,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    """Taylor-style reaction function, scaled by the mage's effectiveness."""

    mon = rules.monetary
    alpha = mon.alpha * effectiveness
    gamma = mon.gamma * effectiveness
    rate = (
        mon.neutral_real_rate
        + mon.target_inflation
        + alpha * (resources.inflation - mon.target_inflation)
        + gamma * resources.output_gap
    )
    return _clamp(rate, rules.bounds.interest_rate_min, rules.bounds.interest_rate_max)


def debt_risk_premium(debt_to_gdp: float, *, rules: RulesConfig = DEFAULT_RULES) -> float:
    demand = rules.demand
    if debt_to_gdp <= demand.debt_risk_threshold:
        return 0.0
    return (debt_to_gdp - demand.debt_risk_threshold) * demand.debt_risk_slope


def is_curve_growth(
    resources: PlayerResources,
    policies: PolicyChoices,
    *,
    net_exports_value: float,
    capital_gdp_effect: float,
    twin_premium: float,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    """Quarterly GDP growth relative to potential."""

    demand = rules.demand
    real_rate_diff = (
        resources.interest_rate
        + debt_risk_premium(resources.debt_to_gdp, rules=rules)
        + twin_premium
        - resources.inflation
        - rules.monetary.neutral_real_rate
    )
    return (
        -demand.beta * real_rate_diff / 100
        + policies.total_gov_spending / 100 * demand.gov_spending_multiplier
        + net_exports_value
        + capital_gdp_effect
    )


def phillips_curve(
    resources: PlayerResources,
    supply_shock: float,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    """Adaptive-expectations Phillips curve using the current output gap."""

    ph = rules.phillips
    target = rules.monetary.target_inflation
    expected = ph.expectation_persistence * resources.inflation + (
        1 - ph.expectation_persistence
    ) * target
    inflation = expected + ph.slope * resources.output_gap * 100 + supply_shock
    return _clamp(inflation, rules.bounds.inflation_min, rules.bounds.inflation_max)


def next_population(
    resources: PlayerResources,
    net_migration_rate: float,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    pop = rules.population
    healthcare_relief = resources.healthcare_index / pop.healthcare_divisor
    death_rate = max(pop.min_death_rate, pop.base_death_rate - healthcare_relief)
    quarterly_growth = (pop.birth_rate - death_rate + net_migration_rate) / 4
    return max(rules.bounds.population_floor, resources.population * (1 + quarterly_growth))


def next_debt(
    resources: PlayerResources,
    policies: PolicyChoices,
    debt_spillover: float,
) -> float:
    """Quarterly budget identity: spending less taxes plus interest and trade spillover."""

    interest_cost = resources.interest_rate * resources.debt_to_gdp / 100
    deficit = policies.total_gov_spending - policies.tax_rate + interest_cost + debt_spillover
    return max(0.0, resources.debt_to_gdp + deficit / 4)


def okun_unemployment(resources: PlayerResources, *, rules: RulesConfig = DEFAULT_RULES) -> float:
    ratio = resources.gdp / resources.potential_gdp if resources.potential_gdp > 0 else 0.0
    unemployment = (1 - math.sqrt(max(0.0, ratio))) * 100 + rules.labour.natural_unemployment
    return _clamp(unemployment, rules.bounds.unemployment_min, rules.bounds.unemployment_max)


def clamp_resources(
    resources: PlayerResources, *, rules: RulesConfig = DEFAULT_RULES
) -> PlayerResources:
    """Force every bounded field back inside its range."""

    b = rules.bounds
    return replace(
        resources,
        population=max(b.population_floor, resources.population),
        inflation=_clamp(resources.inflation, b.inflation_min, b.inflation_max),
        interest_rate=_clamp(resources.interest_rate, b.interest_rate_min, b.interest_rate_max),
        unemployment=_clamp(resources.unemployment, b.unemployment_min, b.unemployment_max),
        debt_to_gdp=max(b.debt_floor, resources.debt_to_gdp),
        education_index=_clamp(resources.education_index, b.index_min, b.index_max),
        healthcare_index=_clamp(resources.healthcare_index, b.index_min, b.index_max),
        infrastructure_index=_clamp(resources.infrastructure_index, b.index_min, b.index_max),
    )


def resolve_player(
    resolution_input: ResolutionInput,
    world: WorldState,
    weights: ScoringWeights,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> PlayerOutcome:
    """Resolve one player's quarter against a fixed WorldState."""

    policies = resolution_input.policies
    resources, modifiers = apply_cabinet_effects(
        resolution_input.resources, policies, rules=rules
    )

    # Growth proxy is the gap the quarter opened with.
    money = money_supply(
        resources, policies, resolution_input.resources.output_gap, rules=rules
    )

    if policies.cbrf_autopilot:
        rate = central_bank_rate(resources, modifiers.mage, rules=rules)
    else:
        rate = _clamp(
            policies.interest_rate, rules.bounds.interest_rate_min, rules.bounds.interest_rate_max
        )
    resources = replace(resources, interest_rate=rate)

    # Own side of every differential comes from the pass snapshot.
    observed = world.players.get(resolution_input.player_id, resources)
    flows = capital_flows(observed, policies, world, rules=rules)
    trade = net_exports(observed, policies, world, rules=rules)
    twin = twin_deficits(trade.trade_balance, rules=rules)

    growth = is_curve_growth(
        resources,
        policies,
        net_exports_value=trade.net_exports,
        capital_gdp_effect=flows.gdp_effect,
        twin_premium=twin.risk_premium,
        rules=rules,
    )
    resources = replace(resources, gdp=resources.potential_gdp * (1 + growth))
    resources = replace(
        resources, inflation=phillips_curve(resources, money.supply_shock, rules=rules)
    )

    moves = migration(observed, policies, world, rules=rules)
    resources = replace(
        resources, population=next_population(resources, moves.net_migration_rate, rules=rules)
    )
    resources = replace(resources, gdp_per_capita=resources.gdp / resources.population)
    resources = replace(
        resources, debt_to_gdp=next_debt(resources, policies, twin.debt_spillover)
    )
    resources = replace(
        resources, exchange_rate=resources.exchange_rate * (1 + flows.exchange_rate_change)
    )
    resources = replace(resources, unemployment=okun_unemployment(resources, rules=rules))
    resources = replace(
        resources,
        trade_balance=trade.trade_balance,
        money_supply_index=money.money_supply_index,
        quality_of_life=moves.quality_of_life,
        tax_rate=policies.tax_rate,
    )

    resources, events = apply_random_events(resources, resolution_input.seed, rules=rules)
    resources = clamp_resources(resources, rules=rules)
    events.extend(detect_crises(resources, rules=rules))

    breakdown = calculate_score(
        resources,
        resolution_input.starting_resources,
        resolution_input.quarters_played,
        weights,
        rules=rules,
    )
    return PlayerOutcome(
        player_id=resolution_input.player_id,
        score=breakdown.total,
        resources=resources,
        score_breakdown=breakdown,
        events=tuple(events),
        interactions=InteractionEffects(
            capital_flows=flows,
            net_exports=trade,
            migration=moves,
            money=money,
            twin_deficits=twin,
        ),
    )
