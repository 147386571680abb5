"""Starting resources and the fallback policy for non-submitting players.

Both values feed directly into reproducible outcomes, so they must not be
changed without a migration of existing games.
"""

from __future__ import annotations

from dataclasses import replace

from .enums import (
    CapitalControls,
    DiplomatAssignment,
    EngineerAssignment,
    ImmigrationPolicy,
    MageAssignment,
    QEStance,
    WarriorAssignment,
)
from .interactions import quality_of_life
from .models import CabinetAssignment, MinisterSlot, PlayerResources, PolicyChoices

_BASE_RESOURCES = PlayerResources(
    gdp=2_000_000_000_000,
    potential_gdp=2_000_000_000_000,
    gdp_per_capita=40_000,
    population=50_000_000,
    inflation=2.0,
    interest_rate=4.0,
    debt_to_gdp=60.0,
    exchange_rate=1.0,
    unemployment=5.0,
    education_index=50.0,
    healthcare_index=50.0,
    infrastructure_index=50.0,
    tax_rate=28.0,
    trade_balance=0.0,
    money_supply_index=100.0,
)

DEFAULT_PLAYER_RESOURCES = replace(
    _BASE_RESOURCES, quality_of_life=quality_of_life(_BASE_RESOURCES)
)

DEFAULT_CABINET = CabinetAssignment(
    warrior=MinisterSlot(focus=2, assignment=WarriorAssignment.TARIFF_MANAGEMENT),
    mage=MinisterSlot(focus=3, assignment=MageAssignment.INTEREST_RATE_CONTROL),
    engineer=MinisterSlot(focus=3, assignment=EngineerAssignment.INFRASTRUCTURE),
    diplomat=MinisterSlot(focus=2, assignment=DiplomatAssignment.TRADE_NEGOTIATIONS),
)

DEFAULT_POLICIES = PolicyChoices(
    cabinet=DEFAULT_CABINET,
    interest_rate=4.0,
    cbrf_autopilot=True,
    gov_spending_education=3.0,
    gov_spending_healthcare=7.0,
    gov_spending_infrastructure=5.0,
    tax_rate=28.0,
    tariff_rate=0.0,
    immigration_policy=ImmigrationPolicy.MODERATE,
    qe_stance=QEStance.NEUTRAL,
    capital_controls=CapitalControls.OPEN,
)
