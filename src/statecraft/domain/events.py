"""Random shocks and crisis detection."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from statecraft.utils.rng import check_success

from .enums import GameEventType
from .models import GameEvent, PlayerResources
from .rules_config import DEFAULT_RULES, RulesConfig


@dataclass(frozen=True, slots=True)
class RandomEvent:
    key: str
    event: GameEvent
    apply: Callable[[PlayerResources], PlayerResources]


def _oil_price_shock(r: PlayerResources) -> PlayerResources:
    return replace(r, inflation=r.inflation + 3.0)


def _productivity_boom(r: PlayerResources) -> PlayerResources:
    return replace(r, potential_gdp=r.potential_gdp * 1.02)


def _financial_crisis(r: PlayerResources) -> PlayerResources:
    return replace(r, gdp=r.gdp * 0.97, unemployment=r.unemployment + 2)


def _tech_breakthrough(r: PlayerResources) -> PlayerResources:
    return replace(
        r,
        education_index=min(100.0, r.education_index + 10),
        potential_gdp=r.potential_gdp * 1.005,
    )


RANDOM_EVENTS: tuple[RandomEvent, ...] = (
    RandomEvent(
        key="oil_price_shock",
        event=GameEvent(
            type=GameEventType.SHOCK,
            title="Oil Price Shock",
            description="Global oil prices surge, causing inflation spike",
            impact={"inflation": 3.0},
        ),
        apply=_oil_price_shock,
    ),
    RandomEvent(
        key="productivity_boom",
        event=GameEvent(
            type=GameEventType.SHOCK,
            title="Productivity Boom",
            description="A wave of innovation boosts potential output",
            impact={"potential_gdp": 0.02},
        ),
        apply=_productivity_boom,
    ),
    RandomEvent(
        key="financial_crisis",
        event=GameEvent(
            type=GameEventType.CRISIS,
            title="Financial Crisis",
            description="Banking sector instability causes economic contraction",
            impact={"gdp": -0.03, "unemployment": 2.0},
        ),
        apply=_financial_crisis,
    ),
    RandomEvent(
        key="tech_breakthrough",
        event=GameEvent(
            type=GameEventType.ACHIEVEMENT,
            title="Tech Breakthrough",
            description="Major technological innovation drives growth",
            impact={"education_index": 10.0, "potential_gdp": 0.005},
        ),
        apply=_tech_breakthrough,
    ),
)


def apply_random_events(
    resources: PlayerResources,
    seed: str,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> tuple[PlayerResources, list[GameEvent]]:
    """Roll every random event independently; several may fire together."""

    fired: list[GameEvent] = []
    for random_event in RANDOM_EVENTS:
        roll = check_success(
            f"{seed}:{random_event.key}",
            rules.events.random_event_probability,
            rules.events.event_dice,
        )
        if roll["success"]:
            resources = random_event.apply(resources)
            fired.append(random_event.event)
    return resources, fired


def detect_crises(
    resources: PlayerResources, *, rules: RulesConfig = DEFAULT_RULES
) -> list[GameEvent]:
    """Observational crisis events; they never change resources."""

    crises: list[GameEvent] = []
    if resources.debt_to_gdp > rules.events.debt_crisis_threshold:
        crises.append(
            GameEvent(
                type=GameEventType.CRISIS,
                title="Debt Crisis",
                description="Debt exceeds 150% of GDP. Austerity measures required.",
                impact={"debt_to_gdp": resources.debt_to_gdp},
            )
        )
    if resources.inflation > rules.events.hyperinflation_threshold:
        crises.append(
            GameEvent(
                type=GameEventType.CRISIS,
                title="Hyperinflation",
                description="Inflation exceeds 20%. Currency collapsing.",
                impact={"inflation": resources.inflation},
            )
        )
    return crises
