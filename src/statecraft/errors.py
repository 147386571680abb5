"""Exception taxonomy shared by the domain and service layers."""

from __future__ import annotations

from dataclasses import dataclass


class StatecraftError(Exception):
    """Base class for all expected Statecraft failures."""


@dataclass(frozen=True, slots=True)
class FieldError:
    """One violated bound on a submitted policy."""

    field: str
    message: str


class ValidationError(StatecraftError):
    """A policy submission violates one or more stated bounds."""

    def __init__(self, errors: list[FieldError]) -> None:
        summary = "; ".join(f"{error.field}: {error.message}" for error in errors)
        super().__init__(f"Invalid policies: {summary}")
        self.errors = list(errors)


class ConflictError(StatecraftError):
    """The quarter is already resolving or completed."""

    def __init__(self, quarter_id: int) -> None:
        super().__init__(f"Quarter {quarter_id} is already resolving or completed")
        self.quarter_id = quarter_id


class NotFoundError(StatecraftError):
    def __init__(self, kind: str, identifier: object) -> None:
        super().__init__(f"{kind} {identifier} not found")
        self.kind = kind
        self.identifier = identifier


class GameStateError(StatecraftError):
    """A lifecycle operation is not allowed in the game's current state."""
