"""Tests for the lagged and equilibrium resolution drivers."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from statecraft.domain.defaults import DEFAULT_PLAYER_RESOURCES, DEFAULT_POLICIES
from statecraft.domain.enums import CapitalControls, ResolutionMode, ScoringPreset
from statecraft.domain.equilibrium import opening_world_state, resolve_quarter
from statecraft.domain.models import PlayerID, ResolutionInput
from statecraft.domain.rules_config import EquilibriumRules, EventRules, RulesConfig
from statecraft.domain.scoring import SCORING_PRESETS
from statecraft.domain.world import aggregate_world_state

QUIET = RulesConfig(events=EventRules(random_event_probability=0.0))
WEIGHTS = SCORING_PRESETS[ScoringPreset.BALANCED_GROWTH]


def _input(player_id, resources=DEFAULT_PLAYER_RESOURCES, policies=DEFAULT_POLICIES):
    return ResolutionInput(
        player_id=PlayerID(player_id),
        resources=resources,
        policies=policies,
        starting_resources=DEFAULT_PLAYER_RESOURCES,
        quarters_played=1,
        seed=f"1:1:{player_id}:events",
    )


def _asymmetric_inputs():
    hawk = replace(DEFAULT_POLICIES, cbrf_autopilot=False, interest_rate=9.0)
    dove = replace(
        DEFAULT_POLICIES,
        cbrf_autopilot=False,
        interest_rate=1.0,
        capital_controls=CapitalControls.OPEN,
    )
    return [
        _input("hawk", replace(DEFAULT_PLAYER_RESOURCES, interest_rate=9.0), hawk),
        _input("dove", replace(DEFAULT_PLAYER_RESOURCES, interest_rate=1.0), dove),
    ]


def test_single_player_modes_agree():
    inputs = [_input("solo")]
    lagged = resolve_quarter(inputs, WEIGHTS, mode=ResolutionMode.LAGGED, rules=QUIET)
    equilibrium = resolve_quarter(inputs, WEIGHTS, mode=ResolutionMode.EQUILIBRIUM, rules=QUIET)

    assert lagged.outcomes == equilibrium.outcomes
    assert equilibrium.iterations == 1
    assert equilibrium.converged is True


def test_lagged_runs_one_pass():
    result = resolve_quarter(_asymmetric_inputs(), WEIGHTS, rules=QUIET)
    assert result.iterations == 1
    assert result.converged is True
    assert set(result.outcomes) == {"hawk", "dove"}


def test_world_state_is_aggregated_from_final_outcomes():
    inputs = _asymmetric_inputs()
    result = resolve_quarter(inputs, WEIGHTS, rules=QUIET)
    expected = aggregate_world_state(
        [(i.player_id, result.outcomes[i.player_id].resources, i.policies) for i in inputs],
        rules=QUIET,
    )
    assert result.world_state == expected
    assert result.world_state != opening_world_state(inputs, rules=QUIET)


def test_symmetric_players_get_identical_outcomes():
    inputs = [_input("a"), _input("b")]
    result = resolve_quarter(inputs, WEIGHTS, mode=ResolutionMode.EQUILIBRIUM, rules=QUIET)
    a, b = result.outcomes["a"], result.outcomes["b"]
    assert a.resources.gdp == pytest.approx(b.resources.gdp, rel=1e-6)
    assert a.resources.inflation == pytest.approx(b.resources.inflation, abs=1e-6)
    assert a.score == pytest.approx(b.score, abs=1e-6)


def test_order_of_players_does_not_change_results():
    inputs = _asymmetric_inputs()
    forward = resolve_quarter(inputs, WEIGHTS, mode=ResolutionMode.EQUILIBRIUM, rules=QUIET)
    backward = resolve_quarter(
        list(reversed(inputs)), WEIGHTS, mode=ResolutionMode.EQUILIBRIUM, rules=QUIET
    )
    assert forward.outcomes == backward.outcomes
    assert forward.world_state == backward.world_state


def test_equilibrium_respects_iteration_cap():
    rules = replace(QUIET, equilibrium=EquilibriumRules(max_iterations=2, tolerance=0.0))
    result = resolve_quarter(
        _asymmetric_inputs(), WEIGHTS, mode=ResolutionMode.EQUILIBRIUM, rules=rules
    )
    assert result.iterations == 2
    assert result.converged is False


def test_equilibrium_converges_with_loose_tolerance():
    rules = replace(QUIET, equilibrium=EquilibriumRules(max_iterations=5, tolerance=1e6))
    result = resolve_quarter(
        _asymmetric_inputs(), WEIGHTS, mode=ResolutionMode.EQUILIBRIUM, rules=rules
    )
    assert result.iterations == 1
    assert result.converged is True


def test_snapshots_rank_every_player():
    result = resolve_quarter(_asymmetric_inputs(), WEIGHTS, rules=QUIET)
    assert sorted(s.rank for s in result.snapshots) == [1, 2]
    assert result.snapshots[0].score >= result.snapshots[1].score


def test_executor_gives_same_results():
    inputs = _asymmetric_inputs()
    serial = resolve_quarter(inputs, WEIGHTS, mode=ResolutionMode.EQUILIBRIUM, rules=QUIET)
    with ThreadPoolExecutor(max_workers=2) as executor:
        parallel = resolve_quarter(
            inputs, WEIGHTS, mode=ResolutionMode.EQUILIBRIUM, rules=QUIET, executor=executor
        )
    assert parallel.outcomes == serial.outcomes
    assert parallel.iterations == serial.iterations


def test_high_rate_country_attracts_capital():
    result = resolve_quarter(_asymmetric_inputs(), WEIGHTS, rules=QUIET)
    hawk = result.outcomes["hawk"].interactions
    dove = result.outcomes["dove"].interactions
    assert hawk.capital_flows.exchange_rate_change > 0
    assert dove.capital_flows.exchange_rate_change < 0
