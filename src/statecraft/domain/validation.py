"""Submission validation.

Validation runs strictly before resolution; every violated bound is
collected so the submitter sees all problems at once.
"""

from __future__ import annotations

from statecraft.errors import FieldError, ValidationError

from .cabinet import parse_assignment, required_focus
from .enums import CapitalControls, ImmigrationPolicy, MinisterRole, QEStance
from .models import CabinetAssignment, PolicyChoices
from .rules_config import DEFAULT_RULES, RulesConfig

# (field, lower, upper) in percentage points
POLICY_BOUNDS: tuple[tuple[str, float, float], ...] = (
    ("interest_rate", -1.0, 20.0),
    ("tax_rate", 15.0, 45.0),
    ("gov_spending_education", 0.0, 10.0),
    ("gov_spending_healthcare", 0.0, 15.0),
    ("gov_spending_infrastructure", 0.0, 10.0),
    ("tariff_rate", 0.0, 25.0),
)

MAX_TOTAL_GOV_SPENDING = 30.0


def validate_cabinet_assignment(
    cabinet: CabinetAssignment, *, rules: RulesConfig = DEFAULT_RULES
) -> list[FieldError]:
    """Return every cabinet rule the assignment violates."""

    errors: list[FieldError] = []
    max_focus = rules.cabinet.max_focus_per_minister
    total_focus = 0

    for role in MinisterRole:
        slot = getattr(cabinet, str(role))
        if not 0 <= slot.focus <= max_focus:
            errors.append(FieldError(str(role), f"Focus must be 0-{max_focus}"))
        total_focus += slot.focus

        assignment = parse_assignment(role, slot.assignment)
        if assignment is None:
            errors.append(FieldError(str(role), f"Invalid assignment: {slot.assignment}"))
            continue
        minimum = required_focus(assignment)
        if slot.focus < minimum:
            errors.append(FieldError(str(role), f"{assignment} requires focus {minimum}+"))

    expected = rules.cabinet.total_focus_points
    if total_focus != expected:
        errors.append(
            FieldError(
                "total",
                f"Must use exactly {expected} focus points (using {total_focus})",
            )
        )
    return errors


def validate_policies(
    policies: PolicyChoices, *, rules: RulesConfig = DEFAULT_RULES
) -> list[FieldError]:
    """Return every bound the submitted policies violate."""

    errors: list[FieldError] = []

    for name, lower, upper in POLICY_BOUNDS:
        value = getattr(policies, name)
        if not lower <= value <= upper:
            errors.append(FieldError(name, f"Must be between {lower:g}% and {upper:g}%"))

    if policies.total_gov_spending > MAX_TOTAL_GOV_SPENDING:
        errors.append(
            FieldError(
                "gov_spending",
                f"Total government spending cannot exceed {MAX_TOTAL_GOV_SPENDING:g}% of GDP",
            )
        )

    for name, enum_type in (
        ("immigration_policy", ImmigrationPolicy),
        ("qe_stance", QEStance),
        ("capital_controls", CapitalControls),
    ):
        value = getattr(policies, name)
        if value not in set(enum_type):
            errors.append(FieldError(name, f"Unknown option: {value}"))

    errors.extend(validate_cabinet_assignment(policies.cabinet, rules=rules))
    return errors


def ensure_valid_policies(
    policies: PolicyChoices, *, rules: RulesConfig = DEFAULT_RULES
) -> PolicyChoices:
    """Raise :class:`ValidationError` unless ``policies`` is acceptable."""

    errors = validate_policies(policies, rules=rules)
    if errors:
        raise ValidationError(errors)
    return policies
