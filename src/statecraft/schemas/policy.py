"""Incoming policy payloads.

Field names are snake_case; camelCase keys sent by browser clients are
accepted as aliases.  Only types are checked here; policy bounds are
enforced by :mod:`statecraft.domain.validation` so every violation is
reported together.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from statecraft.domain.enums import CapitalControls, ImmigrationPolicy, QEStance
from statecraft.domain.models import CabinetAssignment, MinisterSlot, PolicyChoices
from statecraft.errors import FieldError, ValidationError


def _coerce(enum_type: type[StrEnum], value: str) -> Any:
    """Enum member when ``value`` is valid, otherwise the raw string for validation to report."""

    try:
        return enum_type(value)
    except ValueError:
        return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MinisterSlotIn(_CamelModel):
    focus: int = Field(..., description="Focus points assigned to this minister")
    assignment: str = Field(..., description="Portfolio id valid for the minister's role")


class CabinetAssignmentIn(_CamelModel):
    warrior: MinisterSlotIn
    mage: MinisterSlotIn
    engineer: MinisterSlotIn
    diplomat: MinisterSlotIn


class PolicySubmission(_CamelModel):
    cabinet_assignment: CabinetAssignmentIn
    interest_rate: float = Field(default=4.0, description="Manual policy rate, percent")
    cbrf_autopilot: bool = Field(default=True, description="Let the reaction function set the rate")
    gov_spending_education: float = Field(default=3.0, description="Percent of GDP")
    gov_spending_healthcare: float = Field(default=7.0, description="Percent of GDP")
    gov_spending_infrastructure: float = Field(default=5.0, description="Percent of GDP")
    tax_rate: float = Field(default=28.0, description="Percent of GDP")
    tariff_rate: float = Field(default=0.0, description="Uniform tariff, percent")
    immigration_policy: str = Field(default="moderate")
    qe_stance: str = Field(default="neutral")
    capital_controls: str = Field(default="open")

    def to_domain(self) -> PolicyChoices:
        cabinet = self.cabinet_assignment
        return PolicyChoices(
            cabinet=CabinetAssignment(
                warrior=MinisterSlot(cabinet.warrior.focus, cabinet.warrior.assignment),
                mage=MinisterSlot(cabinet.mage.focus, cabinet.mage.assignment),
                engineer=MinisterSlot(cabinet.engineer.focus, cabinet.engineer.assignment),
                diplomat=MinisterSlot(cabinet.diplomat.focus, cabinet.diplomat.assignment),
            ),
            interest_rate=self.interest_rate,
            cbrf_autopilot=self.cbrf_autopilot,
            gov_spending_education=self.gov_spending_education,
            gov_spending_healthcare=self.gov_spending_healthcare,
            gov_spending_infrastructure=self.gov_spending_infrastructure,
            tax_rate=self.tax_rate,
            tariff_rate=self.tariff_rate,
            immigration_policy=_coerce(ImmigrationPolicy, self.immigration_policy),
            qe_stance=_coerce(QEStance, self.qe_stance),
            capital_controls=_coerce(CapitalControls, self.capital_controls),
        )


def parse_policy_payload(payload: dict[str, Any]) -> PolicyChoices:
    """Parse an untrusted JSON payload into (not yet validated) PolicyChoices.

    Raises:
        ValidationError: If the payload has missing fields or wrong types
    """
    try:
        submission = PolicySubmission.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(
            [
                FieldError(".".join(str(part) for part in error["loc"]), error["msg"])
                for error in exc.errors()
            ]
        ) from exc
    return submission.to_domain()
