"""Utility functions for the Statecraft engine."""

from statecraft.utils.rng import check_success, generate_seed, roll_dice

__all__ = [
    "check_success",
    "generate_seed",
    "roll_dice",
]
