"""Tests for incoming payload schemas."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from statecraft.domain.enums import ImmigrationPolicy, ResolutionMode, ScoringPreset
from statecraft.domain.validation import validate_policies
from statecraft.errors import ValidationError
from statecraft.schemas import GameCreate, JoinGame, PolicySubmission, parse_policy_payload

CABINET = {
    "warrior": {"focus": 2, "assignment": "tariff_management"},
    "mage": {"focus": 3, "assignment": "interest_rate_control"},
    "engineer": {"focus": 3, "assignment": "infrastructure"},
    "diplomat": {"focus": 2, "assignment": "trade_negotiations"},
}


def test_snake_case_payload():
    policies = parse_policy_payload(
        {"cabinet_assignment": CABINET, "tax_rate": 30.0, "immigration_policy": "open"}
    )
    assert policies.tax_rate == 30.0
    assert policies.immigration_policy == ImmigrationPolicy.OPEN
    assert policies.cabinet.mage.focus == 3
    assert validate_policies(policies) == []


def test_camel_case_payload():
    policies = parse_policy_payload(
        {
            "cabinetAssignment": CABINET,
            "cbrfAutopilot": False,
            "interestRate": 6.5,
            "govSpendingEducation": 4.0,
        }
    )
    assert policies.cbrf_autopilot is False
    assert policies.interest_rate == 6.5
    assert policies.gov_spending_education == 4.0


def test_defaults_fill_missing_fields():
    policies = PolicySubmission.model_validate({"cabinet_assignment": CABINET}).to_domain()
    assert policies.tax_rate == 28.0
    assert policies.tariff_rate == 0.0
    assert policies.cbrf_autopilot is True


def test_unknown_enum_passes_through_to_validation():
    policies = parse_policy_payload({"cabinet_assignment": CABINET, "qe_stance": "helicopter"})
    assert policies.qe_stance == "helicopter"
    assert {error.field for error in validate_policies(policies)} == {"qe_stance"}


def test_missing_cabinet_is_a_validation_error():
    with pytest.raises(ValidationError) as excinfo:
        parse_policy_payload({"tax_rate": 30.0})
    assert any("cabinet" in error.field for error in excinfo.value.errors)


def test_wrong_type_is_a_validation_error():
    with pytest.raises(ValidationError):
        parse_policy_payload({"cabinet_assignment": CABINET, "tax_rate": "lots"})


class TestGameCreate:
    def test_defaults(self):
        request = GameCreate(name="League", player_name="Alice")
        assert request.scoring_preset == ScoringPreset.BALANCED_GROWTH
        assert request.resolution_mode == ResolutionMode.LAGGED
        assert request.total_quarters is None

    def test_custom_weights(self):
        request = GameCreate(
            name="League",
            player_name="Alice",
            scoring_preset="custom",
            scoring_weights={
                "gdp_growth": 0.4,
                "gdp_per_capita_growth": 0.4,
                "population_growth": 0.1,
                "stability_score": 0.1,
            },
        )
        assert request.scoring_weights.gdp_growth == 0.4

    def test_rejects_empty_name(self):
        with pytest.raises(PydanticValidationError):
            GameCreate(name="", player_name="Alice")

    def test_rejects_unknown_mode(self):
        with pytest.raises(PydanticValidationError):
            GameCreate(name="League", player_name="Alice", resolution_mode="simultaneous")


def test_join_requires_name():
    with pytest.raises(PydanticValidationError):
        JoinGame(player_name="")
