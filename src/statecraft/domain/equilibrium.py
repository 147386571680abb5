"""Lagged and equilibrium resolution drivers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import Executor
from functools import partial

from .enums import ResolutionMode
from .macro import resolve_player
from .models import (
    PlayerID,
    PlayerOutcome,
    ResolutionInput,
    ResolutionResult,
    ScoringWeights,
    WorldState,
)
from .rules_config import DEFAULT_RULES, RulesConfig
from .scoring import rank_outcomes
from .world import aggregate_world_state, world_state_delta

logger = logging.getLogger(__name__)


def opening_world_state(
    inputs: Sequence[ResolutionInput], *, rules: RulesConfig = DEFAULT_RULES
) -> WorldState:
    """WorldState from the resources players bring into the quarter."""

    return aggregate_world_state(
        ((item.player_id, item.resources, item.policies) for item in inputs), rules=rules
    )


def outcome_world_state(
    inputs: Sequence[ResolutionInput],
    outcomes: dict[PlayerID, PlayerOutcome],
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> WorldState:
    return aggregate_world_state(
        (
            (item.player_id, outcomes[item.player_id].resources, item.policies)
            for item in inputs
        ),
        rules=rules,
    )


def resolve_pass(
    inputs: Sequence[ResolutionInput],
    world: WorldState,
    weights: ScoringWeights,
    *,
    rules: RulesConfig = DEFAULT_RULES,
    executor: Executor | None = None,
) -> dict[PlayerID, PlayerOutcome]:
    """Resolve every player once against ``world``.

    Players only read the shared snapshot, so an executor may map them in
    parallel; results are keyed by player id either way.
    """

    resolve = partial(resolve_player, world=world, weights=weights, rules=rules)
    if executor is None:
        results = [resolve(item) for item in inputs]
    else:
        results = list(executor.map(resolve, inputs))
    return {outcome.player_id: outcome for outcome in results}


def resolve_quarter(
    inputs: Sequence[ResolutionInput],
    weights: ScoringWeights,
    *,
    mode: ResolutionMode = ResolutionMode.LAGGED,
    rules: RulesConfig = DEFAULT_RULES,
    executor: Executor | None = None,
) -> ResolutionResult:
    """Resolve a full quarter for every player.

    Lagged mode resolves once against the opening WorldState.  Equilibrium
    mode re-resolves every player (always from their opening resources)
    against the WorldState produced by the previous iteration, until the
    aggregates move less than the tolerance or the iteration cap is hit.
    Only the final iteration's outcomes are returned, together with the
    WorldState aggregated from them.
    """

    world = opening_world_state(inputs, rules=rules)
    outcomes = resolve_pass(inputs, world, weights, rules=rules, executor=executor)
    iterations = 1
    converged = True

    if mode == ResolutionMode.EQUILIBRIUM and len(inputs) > 1:
        eq = rules.equilibrium
        converged = False
        while True:
            next_world = outcome_world_state(inputs, outcomes, rules=rules)
            delta = world_state_delta(world, next_world)
            logger.debug("Equilibrium iteration %d delta=%.6f", iterations, delta)
            world = next_world
            if delta < eq.tolerance:
                converged = True
                break
            if iterations >= eq.max_iterations:
                break
            outcomes = resolve_pass(inputs, world, weights, rules=rules, executor=executor)
            iterations += 1
        if not converged:
            logger.info(
                "Equilibrium did not converge after %d iterations (delta=%.6f)",
                iterations,
                delta,
            )
    else:
        world = outcome_world_state(inputs, outcomes, rules=rules)

    return ResolutionResult(
        outcomes=outcomes,
        snapshots=rank_outcomes(outcomes.values()),
        world_state=world,
        iterations=iterations,
        converged=converged,
    )
