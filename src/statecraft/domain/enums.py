"""Enumerations and type aliases for the Statecraft domain."""

from __future__ import annotations

from enum import StrEnum


class MinisterRole(StrEnum):
    """The four cabinet seats every player staffs."""

    WARRIOR = "warrior"
    MAGE = "mage"
    ENGINEER = "engineer"
    DIPLOMAT = "diplomat"


class WarriorAssignment(StrEnum):
    """Trade & competition portfolio."""

    TARIFF_MANAGEMENT = "tariff_management"
    STRATEGIC_RESERVES = "strategic_reserves"
    CURRENCY_DEFENSE = "currency_defense"
    ECONOMIC_WARFARE = "economic_warfare"


class MageAssignment(StrEnum):
    """Central bank portfolio."""

    INTEREST_RATE_CONTROL = "interest_rate_control"
    QE_MANAGEMENT = "qe_management"
    INFLATION_TARGETING = "inflation_targeting"
    FINANCIAL_STABILITY = "financial_stability"
    FORWARD_GUIDANCE = "forward_guidance"


class EngineerAssignment(StrEnum):
    """Development portfolio."""

    INFRASTRUCTURE = "infrastructure"
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    PRODUCTIVITY_INNOVATION = "productivity_innovation"
    GREEN_TRANSITION = "green_transition"


class DiplomatAssignment(StrEnum):
    """Foreign affairs portfolio."""

    TRADE_NEGOTIATIONS = "trade_negotiations"
    IMMIGRATION_POLICY = "immigration_policy"
    INTERNATIONAL_AID = "international_aid"
    CRISIS_MANAGEMENT = "crisis_management"
    GLOBAL_INITIATIVES = "global_initiatives"


class ImmigrationPolicy(StrEnum):
    RESTRICTIVE = "restrictive"
    MODERATE = "moderate"
    OPEN = "open"


class QEStance(StrEnum):
    TIGHTENING = "tightening"
    NEUTRAL = "neutral"
    EASING = "easing"


class CapitalControls(StrEnum):
    OPEN = "open"
    MODERATE = "moderate"
    STRICT = "strict"


class GameStatus(StrEnum):
    """Game lifecycle states."""

    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"


class QuarterStatus(StrEnum):
    """Quarter lifecycle states; ``ACTIVE -> RESOLVING`` is the claim."""

    ACTIVE = "active"
    RESOLVING = "resolving"
    COMPLETED = "completed"


class ResolutionMode(StrEnum):
    """How cross-country interactions are resolved within a quarter."""

    LAGGED = "lagged"
    EQUILIBRIUM = "equilibrium"


class GameEventType(StrEnum):
    SHOCK = "shock"
    ACHIEVEMENT = "achievement"
    CRISIS = "crisis"
    INFO = "info"


class ScoringPreset(StrEnum):
    BALANCED_GROWTH = "balanced_growth"
    PURE_PROSPERITY = "pure_prosperity"
    POPULATION_POWER = "population_power"
    ECONOMIC_POWERHOUSE = "economic_powerhouse"
    STABILITY_DOCTRINE = "stability_doctrine"
    CUSTOM = "custom"


class JobStatus(StrEnum):
    """Durable resolution job states."""

    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"
