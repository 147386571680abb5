"""Tests for the per-player macro resolver and its building blocks."""

from dataclasses import replace

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from statecraft.domain.defaults import DEFAULT_PLAYER_RESOURCES, DEFAULT_POLICIES
from statecraft.domain.enums import GameEventType, MageAssignment, QEStance, ScoringPreset
from statecraft.domain.macro import (
    central_bank_rate,
    clamp_resources,
    debt_risk_premium,
    next_debt,
    okun_unemployment,
    phillips_curve,
    resolve_player,
)
from statecraft.domain.models import MinisterSlot, PlayerID, ResolutionInput
from statecraft.domain.rules_config import EventRules, RulesConfig
from statecraft.domain.scoring import SCORING_PRESETS
from statecraft.domain.world import aggregate_world_state

QUIET = RulesConfig(events=EventRules(random_event_probability=0.0))
WEIGHTS = SCORING_PRESETS[ScoringPreset.BALANCED_GROWTH]


def _input(resources=DEFAULT_PLAYER_RESOURCES, policies=DEFAULT_POLICIES, quarters_played=1):
    return ResolutionInput(
        player_id=PlayerID("alice"),
        resources=resources,
        policies=policies,
        starting_resources=DEFAULT_PLAYER_RESOURCES,
        quarters_played=quarters_played,
        seed="1:1:alice:events",
    )


def _solo(resolution_input, rules=QUIET):
    world = aggregate_world_state(
        [(resolution_input.player_id, resolution_input.resources, resolution_input.policies)],
        rules=rules,
    )
    return resolve_player(resolution_input, world, WEIGHTS, rules=rules)


class TestCentralBank:
    def test_on_target_economy_gets_neutral_rate(self):
        assert central_bank_rate(DEFAULT_PLAYER_RESOURCES) == pytest.approx(4.0)

    def test_inflation_raises_rate(self):
        hot = replace(DEFAULT_PLAYER_RESOURCES, inflation=4.0)
        assert central_bank_rate(hot) == pytest.approx(7.0)

    def test_rate_is_clamped(self):
        runaway = replace(DEFAULT_PLAYER_RESOURCES, inflation=40.0)
        assert central_bank_rate(runaway) == 20.0


class TestBuildingBlocks:
    def test_debt_premium_above_threshold_only(self):
        assert debt_risk_premium(90.0) == 0.0
        assert debt_risk_premium(120.0) == pytest.approx(1.0)

    def test_phillips_curve_at_target_is_stable(self):
        assert phillips_curve(DEFAULT_PLAYER_RESOURCES, 0.0) == pytest.approx(2.0)

    def test_phillips_curve_overheating(self):
        hot = replace(DEFAULT_PLAYER_RESOURCES, gdp=DEFAULT_PLAYER_RESOURCES.potential_gdp * 1.02)
        assert phillips_curve(hot, 0.0) == pytest.approx(2.6)

    def test_okun_at_potential_gives_natural_rate(self):
        assert okun_unemployment(DEFAULT_PLAYER_RESOURCES) == pytest.approx(5.0)

    def test_balanced_budget_keeps_debt_flat_without_interest(self):
        resources = replace(DEFAULT_PLAYER_RESOURCES, interest_rate=0.0)
        policies = replace(DEFAULT_POLICIES, tax_rate=15.0)
        assert next_debt(resources, policies, 0.0) == pytest.approx(60.0)

    def test_debt_never_negative(self):
        resources = replace(DEFAULT_PLAYER_RESOURCES, debt_to_gdp=0.5, interest_rate=0.0)
        policies = replace(
            DEFAULT_POLICIES,
            tax_rate=45.0,
            gov_spending_education=0.0,
            gov_spending_healthcare=0.0,
            gov_spending_infrastructure=0.0,
        )
        assert next_debt(resources, policies, 0.0) == 0.0


class TestResolvePlayer:
    def test_inputs_are_not_mutated(self):
        resolution_input = _input()
        _solo(resolution_input)
        assert resolution_input.resources == DEFAULT_PLAYER_RESOURCES

    def test_deterministic(self):
        assert _solo(_input()) == _solo(_input())

    def test_solo_player_has_no_interaction_effects(self):
        effects = _solo(_input()).interactions
        assert effects is not None
        assert effects.capital_flows.gdp_effect == 0.0
        assert effects.net_exports.trade_balance == 0.0
        assert effects.migration.net_migration_rate == pytest.approx(0.0)

    def test_neutral_qe_has_no_supply_shock(self):
        # The engineer lifts potential GDP, but the shock reads the opening gap.
        money = _solo(_input()).interactions.money
        assert money.money_growth == 0.0
        assert money.supply_shock == 0.0

    def test_supply_shock_uses_opening_output_gap(self):
        slack = replace(DEFAULT_PLAYER_RESOURCES, gdp=1.9e12)
        policies = replace(DEFAULT_POLICIES, qe_stance=QEStance.NEUTRAL)
        money = _solo(_input(resources=slack, policies=policies)).interactions.money
        assert money.supply_shock == pytest.approx(-slack.output_gap * 0.5)

    def test_manual_rate_is_used_when_autopilot_off(self):
        policies = replace(DEFAULT_POLICIES, cbrf_autopilot=False, interest_rate=9.0)
        assert _solo(_input(policies=policies)).resources.interest_rate == 9.0

    def test_tax_rate_carried_over(self):
        policies = replace(DEFAULT_POLICIES, tax_rate=33.0)
        assert _solo(_input(policies=policies)).resources.tax_rate == 33.0

    def test_debt_crisis_is_reported(self):
        indebted = replace(DEFAULT_PLAYER_RESOURCES, debt_to_gdp=160.0)
        outcome = _solo(_input(resources=indebted))
        crisis = [event for event in outcome.events if event.title == "Debt Crisis"]
        assert len(crisis) == 1
        assert crisis[0].type == GameEventType.CRISIS
        assert outcome.score_breakdown.penalties <= -50.0

    def test_hyperinflation_is_reported(self):
        hot = replace(DEFAULT_PLAYER_RESOURCES, inflation=35.0)
        titles = {event.title for event in _solo(_input(resources=hot)).events}
        assert "Hyperinflation" in titles

    def test_inflation_targeting_damps_inflation(self):
        cabinet = replace(
            DEFAULT_POLICIES.cabinet,
            mage=MinisterSlot(3, MageAssignment.INFLATION_TARGETING),
        )
        hot = replace(DEFAULT_PLAYER_RESOURCES, inflation=6.0)
        policies = replace(DEFAULT_POLICIES, cabinet=cabinet)
        targeted = _solo(_input(resources=hot, policies=policies))
        baseline = _solo(_input(resources=hot))
        assert targeted.resources.inflation < baseline.resources.inflation

    def test_certain_events_all_fire(self):
        rules = RulesConfig(events=EventRules(random_event_probability=1.0))
        outcome = _solo(_input(), rules=rules)
        titles = [event.title for event in outcome.events]
        assert titles[:4] == [
            "Oil Price Shock",
            "Productivity Boom",
            "Financial Crisis",
            "Tech Breakthrough",
        ]

    def test_first_quarter_score_is_not_zero(self):
        assert _solo(_input(quarters_played=1)).score != 0.0

    def test_score_is_zero_before_any_quarter(self):
        outcome = _solo(_input(quarters_played=0))
        assert outcome.score == 0.0


resources_strategy = st.builds(
    lambda inflation, rate, debt, unemployment, index, population: replace(
        DEFAULT_PLAYER_RESOURCES,
        inflation=inflation,
        interest_rate=rate,
        debt_to_gdp=debt,
        unemployment=unemployment,
        education_index=index,
        healthcare_index=index,
        infrastructure_index=index,
        population=population,
    ),
    st.floats(min_value=-20, max_value=80),
    st.floats(min_value=-5, max_value=30),
    st.floats(min_value=-10, max_value=300),
    st.floats(min_value=-5, max_value=40),
    st.floats(min_value=-20, max_value=150),
    st.floats(min_value=1, max_value=5e8),
)


def _assert_in_bounds(resources, rules=QUIET):
    b = rules.bounds
    assert b.inflation_min <= resources.inflation <= b.inflation_max
    assert b.interest_rate_min <= resources.interest_rate <= b.interest_rate_max
    assert b.unemployment_min <= resources.unemployment <= b.unemployment_max
    assert resources.debt_to_gdp >= b.debt_floor
    assert resources.population >= b.population_floor
    for name in ("education_index", "healthcare_index", "infrastructure_index"):
        assert b.index_min <= getattr(resources, name) <= b.index_max


@given(resources=resources_strategy)
def test_clamp_puts_every_field_in_bounds(resources):
    _assert_in_bounds(clamp_resources(resources, rules=QUIET))


@settings(max_examples=50, deadline=None)
@given(resources=resources_strategy)
def test_resolved_resources_stay_in_bounds(resources):
    outcome = _solo(_input(resources=resources))
    _assert_in_bounds(outcome.resources)
