"""WorldState aggregation across every player resolved together."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .interactions import quality_of_life
from .models import PlayerID, PlayerResources, PolicyChoices, WorldState
from .rules_config import DEFAULT_RULES, RulesConfig

WorldEntry = tuple[PlayerID, PlayerResources, PolicyChoices]

# Aggregates compared between equilibrium iterations.
CONVERGENCE_FIELDS: tuple[str, ...] = (
    "avg_interest_rate",
    "avg_inflation",
    "avg_exchange_rate",
    "avg_quality_of_life",
)


def _weights(values: Sequence[float]) -> list[float]:
    """Normalised weights, falling back to uniform when the total is not positive."""

    total = sum(values)
    if total <= 0:
        return [1 / len(values)] * len(values)
    return [value / total for value in values]


def _weighted(weights: Sequence[float], values: Iterable[float]) -> float:
    return sum(weight * value for weight, value in zip(weights, values, strict=True))


def aggregate_world_state(
    entries: Iterable[WorldEntry], *, rules: RulesConfig = DEFAULT_RULES
) -> WorldState:
    """Compute the WorldState for a set of players.

    Rates are GDP-weighted, quality of life is population-weighted and the
    tariff average is a simple mean.  Entries are ordered by player id so the
    result does not depend on the order the caller supplies them in.
    """

    ordered = sorted(entries, key=lambda entry: str(entry[0]))
    if not ordered:
        return WorldState(
            avg_interest_rate=0.0,
            avg_inflation=0.0,
            avg_exchange_rate=0.0,
            avg_quality_of_life=0.0,
            avg_tariff_rate=0.0,
            total_gdp=0.0,
            total_population=0.0,
            player_count=0,
        )

    resources = [entry[1] for entry in ordered]
    policies = [entry[2] for entry in ordered]
    gdp_weights = _weights([r.gdp for r in resources])
    population_weights = _weights([r.population for r in resources])

    return WorldState(
        avg_interest_rate=_weighted(gdp_weights, (r.interest_rate for r in resources)),
        avg_inflation=_weighted(gdp_weights, (r.inflation for r in resources)),
        avg_exchange_rate=_weighted(gdp_weights, (r.exchange_rate for r in resources)),
        avg_quality_of_life=_weighted(
            population_weights, (quality_of_life(r, rules=rules) for r in resources)
        ),
        avg_tariff_rate=sum(p.tariff_rate for p in policies) / len(policies),
        total_gdp=sum(r.gdp for r in resources),
        total_population=sum(r.population for r in resources),
        player_count=len(ordered),
        players={entry[0]: entry[1] for entry in ordered},
    )


def world_state_delta(previous: WorldState, current: WorldState) -> float:
    """Largest absolute change across the convergence aggregates."""

    return max(
        abs(getattr(current, name) - getattr(previous, name)) for name in CONVERGENCE_FIELDS
    )
