"""Cabinet catalogue and minister effects."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

from .enums import (
    DiplomatAssignment,
    EngineerAssignment,
    MageAssignment,
    MinisterRole,
    WarriorAssignment,
)
from .models import MinisterSlot, PlayerResources, PolicyChoices
from .rules_config import DEFAULT_RULES, RulesConfig

MINISTER_ASSIGNMENTS: dict[MinisterRole, type[StrEnum]] = {
    MinisterRole.WARRIOR: WarriorAssignment,
    MinisterRole.MAGE: MageAssignment,
    MinisterRole.ENGINEER: EngineerAssignment,
    MinisterRole.DIPLOMAT: DiplomatAssignment,
}

# Assignments that unlock only with enough focus on the minister.
MIN_FOCUS: dict[StrEnum, int] = {
    WarriorAssignment.ECONOMIC_WARFARE: 4,
    MageAssignment.FORWARD_GUIDANCE: 3,
    EngineerAssignment.GREEN_TRANSITION: 3,
    DiplomatAssignment.INTERNATIONAL_AID: 3,
    DiplomatAssignment.GLOBAL_INITIATIVES: 4,
}


def slot_for(policies: PolicyChoices, role: MinisterRole) -> MinisterSlot:
    """Return the cabinet slot for ``role``."""

    return getattr(policies.cabinet, str(role))


def parse_assignment(role: MinisterRole, assignment: str) -> StrEnum | None:
    """Map an assignment id onto the role's enumeration, or ``None`` if invalid."""

    enum_type = MINISTER_ASSIGNMENTS[role]
    try:
        return enum_type(assignment)
    except ValueError:
        return None


def required_focus(assignment: StrEnum) -> int:
    return MIN_FOCUS.get(assignment, 0)


@dataclass(frozen=True, slots=True)
class CabinetModifiers:
    """Focus-derived multipliers consumed by later pipeline steps."""

    warrior: float
    mage: float
    engineer: float
    diplomat: float


def cabinet_modifiers(
    policies: PolicyChoices, *, rules: RulesConfig = DEFAULT_RULES
) -> CabinetModifiers:
    cabinet = policies.cabinet
    effectiveness = rules.cabinet.effectiveness
    return CabinetModifiers(
        warrior=effectiveness(cabinet.warrior.focus),
        mage=effectiveness(cabinet.mage.focus),
        engineer=effectiveness(cabinet.engineer.focus),
        diplomat=effectiveness(cabinet.diplomat.focus),
    )


def apply_cabinet_effects(
    resources: PlayerResources,
    policies: PolicyChoices,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> tuple[PlayerResources, CabinetModifiers]:
    """Apply direct minister effects and return the focus modifiers."""

    cabinet = policies.cabinet
    cab_rules = rules.cabinet
    modifiers = cabinet_modifiers(policies, rules=rules)
    index_max = rules.bounds.index_max
    updated = resources

    if (
        cabinet.mage.assignment == MageAssignment.INFLATION_TARGETING
        and cabinet.mage.focus >= cab_rules.inflation_targeting_min_focus
    ):
        damping = 1 - cab_rules.inflation_targeting_step * cabinet.mage.focus
        updated = replace(updated, inflation=updated.inflation * damping)

    gain = cab_rules.engineer_index_gain * modifiers.engineer
    match cabinet.engineer.assignment:
        case EngineerAssignment.INFRASTRUCTURE:
            updated = replace(
                updated,
                infrastructure_index=min(index_max, updated.infrastructure_index + gain),
                potential_gdp=updated.potential_gdp
                * (1 + cab_rules.infrastructure_potential_gain * modifiers.engineer),
            )
        case EngineerAssignment.EDUCATION:
            updated = replace(
                updated, education_index=min(index_max, updated.education_index + gain)
            )
        case EngineerAssignment.HEALTHCARE:
            updated = replace(
                updated, healthcare_index=min(index_max, updated.healthcare_index + gain)
            )

    if cabinet.diplomat.assignment == DiplomatAssignment.IMMIGRATION_POLICY:
        bonus = cab_rules.immigration_bonus(policies.immigration_policy)
        updated = replace(
            updated, population=updated.population * (1 + bonus * modifiers.diplomat / 4)
        )

    return updated, modifiers
