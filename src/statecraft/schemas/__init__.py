from .game import GameCreate, JoinGame, ScoringWeightsIn
from .policy import CabinetAssignmentIn, MinisterSlotIn, PolicySubmission, parse_policy_payload

__all__ = [
    "CabinetAssignmentIn",
    "GameCreate",
    "JoinGame",
    "MinisterSlotIn",
    "PolicySubmission",
    "ScoringWeightsIn",
    "parse_policy_payload",
]
