"""Cross-country interaction models.

Each model is a pure function of a player's resources and policies plus
the pass-wide :class:`WorldState`.  None of them depends on the order in
which players are resolved.
"""

from __future__ import annotations

from .models import (
    CapitalFlowEffect,
    MigrationEffect,
    MoneySupplyEffect,
    NetExportsEffect,
    PlayerResources,
    PolicyChoices,
    TwinDeficitEffect,
    WorldState,
)
from .rules_config import DEFAULT_RULES, RulesConfig


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def _normalize(value: float, lower: float, upper: float) -> float:
    """Map ``value`` from ``[lower, upper]`` onto ``[0, 1]``."""

    if upper <= lower:
        return 0.0
    return _clamp((value - lower) / (upper - lower), 0.0, 1.0)


def quality_of_life(resources: PlayerResources, *, rules: RulesConfig = DEFAULT_RULES) -> float:
    """Composite 0-1 attractiveness score used for migration."""

    mig = rules.migration
    prosperity = _normalize(
        resources.gdp_per_capita, mig.gdp_per_capita_low, mig.gdp_per_capita_high
    )
    health = _clamp(resources.healthcare_index / 100, 0.0, 1.0)
    education = _clamp(resources.education_index / 100, 0.0, 1.0)
    employment = _clamp(1 - resources.unemployment / mig.unemployment_ceiling, 0.0, 1.0)
    price_stability = max(
        0.0, 1 - abs(resources.inflation - mig.inflation_target) / mig.inflation_tolerance
    )
    return (
        mig.gdp_per_capita_weight * prosperity
        + mig.healthcare_weight * health
        + mig.education_weight * education
        + mig.employment_weight * employment
        + mig.price_stability_weight * price_stability
    )


def capital_flows(
    resources: PlayerResources,
    policies: PolicyChoices,
    world: WorldState,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> CapitalFlowEffect:
    """Uncovered interest parity: capital chases the higher real rate."""

    cf = rules.capital_flows
    own_real_rate = resources.interest_rate - resources.inflation
    world_real_rate = world.avg_interest_rate - world.avg_inflation
    real_rate_diff = own_real_rate - world_real_rate
    flow_pressure = real_rate_diff * cf.dampening(policies.capital_controls)
    return CapitalFlowEffect(
        real_rate_diff=real_rate_diff,
        flow_pressure=flow_pressure,
        exchange_rate_change=flow_pressure * cf.exchange_rate_sensitivity,
        gdp_effect=flow_pressure * cf.gdp_sensitivity,
    )


def net_exports(
    resources: PlayerResources,
    policies: PolicyChoices,
    world: WorldState,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> NetExportsEffect:
    """Price competitiveness from the relative exchange rate plus tariffs."""

    trade = rules.trade
    if world.avg_exchange_rate == 0:
        relative_rate = 1.0
    else:
        relative_rate = resources.exchange_rate / world.avg_exchange_rate
    competitiveness = 1 - relative_rate
    value = (
        trade.competitiveness_weight * competitiveness
        + policies.tariff_rate * trade.own_tariff_weight
        - world.avg_tariff_rate * trade.world_tariff_weight
    )
    return NetExportsEffect(
        competitiveness=competitiveness,
        net_exports=value,
        trade_balance=value * trade.trade_balance_scale,
    )


def migration(
    resources: PlayerResources,
    policies: PolicyChoices,
    world: WorldState,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> MigrationEffect:
    """Net migration toward countries with above-average quality of life."""

    qol = quality_of_life(resources, rules=rules)
    pull = qol - world.avg_quality_of_life
    gate = rules.migration.gate(policies.immigration_policy)
    return MigrationEffect(
        quality_of_life=qol,
        migration_pull=pull,
        net_migration_rate=pull * rules.migration.sensitivity * gate,
    )


def money_supply(
    resources: PlayerResources,
    policies: PolicyChoices,
    gdp_growth_rate: float,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> MoneySupplyEffect:
    """QE stance drives the money supply index and an inflation impulse."""

    money = rules.money
    growth = money.growth(policies.qe_stance)
    return MoneySupplyEffect(
        money_growth=growth,
        money_supply_index=resources.money_supply_index * (1 + growth),
        supply_shock=(growth - gdp_growth_rate) * money.supply_shock_passthrough,
    )


def twin_deficits(
    trade_balance: float, *, rules: RulesConfig = DEFAULT_RULES
) -> TwinDeficitEffect:
    """Risk premium and debt spillover from a persistent trade deficit."""

    td = rules.twin_deficits
    premium = 0.0
    if trade_balance < td.trade_deficit_threshold:
        premium = max(0.0, abs(trade_balance - td.trade_deficit_threshold) * td.premium_slope)
    return TwinDeficitEffect(
        risk_premium=premium,
        debt_spillover=max(0.0, -trade_balance * td.debt_spillover),
    )
