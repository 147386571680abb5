"""Deterministic Random Number Generator (RNG) system for Statecraft.

All randomness is seeded from game state (game_id, quarter, player, context)
so that:
- Reproducibility: the same quarter always draws the same events
- Equilibrium iterations see identical draws for a player
- Audit trail: every roll reports the seed it came from

Examples:
    >>> seed = generate_seed(game_id=1, quarter=3, player_id="alice", context="events")
    >>> result = roll_dice(seed, "1d100")
    >>> result["seed"]
    '1:3:alice:events'
"""

import hashlib
import random
import re
from functools import cache
from typing import Any


def generate_seed(game_id: int, quarter: int, player_id: str, context: str) -> str:
    """Generate deterministic seed from game state.

    Format: "game_id:quarter:player_id:context"

    Args:
        game_id: Game identifier
        quarter: Quarter number being resolved
        player_id: Player the roll is for
        context: What the roll is for (e.g. 'events')

    Returns:
        Seed string

    Raises:
        ValueError: If game_id or quarter is negative
    """
    if game_id < 0:
        raise ValueError(f"game_id must be non-negative, got {game_id}")
    if quarter < 0:
        raise ValueError(f"quarter must be non-negative, got {quarter}")

    return f"{game_id}:{quarter}:{player_id}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random()."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


def _parse_dice_notation(notation: str) -> tuple[int, int]:
    """Parse dice notation like '2d6' into (num_dice, num_sides).

    Raises:
        ValueError: If notation is invalid or values are non-positive
    """
    match = re.match(r"^(\d+)d(\d+)$", notation.lower())
    if not match:
        raise ValueError(
            f"Invalid dice notation: '{notation}'. Expected format: NdM (e.g., '2d6', '1d100')"
        )

    num_dice = int(match.group(1))
    num_sides = int(match.group(2))

    if num_dice <= 0:
        raise ValueError(f"Number of dice must be positive, got {num_dice}")
    if num_sides <= 0:
        raise ValueError(f"Number of sides must be positive, got {num_sides}")

    return num_dice, num_sides


def roll_dice(seed: str, notation: str = "1d100") -> dict[str, Any]:
    """Roll dice with deterministic seed.

    Returns:
        Dictionary containing notation, rolls, total and seed.

    Raises:
        ValueError: If dice notation is invalid
    """
    num_dice, num_sides = _parse_dice_notation(notation)

    rng = random.Random(_seed_to_int(seed))
    rolls = [rng.randint(1, num_sides) for _ in range(num_dice)]

    return {
        "notation": notation,
        "rolls": rolls,
        "total": sum(rolls),
        "seed": seed,
    }


@cache
def _dice_pmf(num_dice: int, num_sides: int) -> dict[int, int]:
    """Outcome counts for the sum of `num_dice` d`num_sides`."""
    pmf: dict[int, int] = {0: 1}
    for _ in range(num_dice):
        new: dict[int, int] = {}
        for total, count in pmf.items():
            for face in range(1, num_sides + 1):
                new[total + face] = new.get(total + face, 0) + count
        pmf = new
    return pmf


@cache
def _dice_threshold_for_probability(probability: float, num_dice: int, num_sides: int) -> int:
    """Find minimal target T such that P(roll >= T) >= probability for NdM.

    For probability=0.0, returns max_roll + 1 (always fail). For probability=1.0,
    returns min_roll (always succeed).
    """
    min_roll = num_dice
    max_roll = num_dice * num_sides

    if probability <= 0.0:
        return max_roll + 1
    if probability >= 1.0:
        return min_roll

    pmf = _dice_pmf(num_dice, num_sides)
    total_outcomes = num_sides**num_dice

    cumulative = 0.0
    for target in range(max_roll, min_roll - 1, -1):
        cumulative += pmf.get(target, 0) / total_outcomes
        if cumulative >= probability:
            return target

    return max_roll + 1


def check_success(seed: str, probability: float, dice_notation: str = "1d100") -> dict[str, Any]:
    """Check if a random event fires with the given probability.

    Common patterns:
        - probability=0.01, dice="1d100" -> success on 100
        - probability=0.5, dice="1d6" -> success on 4+

    Returns:
        Dictionary containing success, roll, target, probability and seed.

    Raises:
        ValueError: If probability not in [0.0, 1.0] or dice notation invalid
    """
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"probability must be between 0.0 and 1.0, got {probability}")

    num_dice, num_sides = _parse_dice_notation(dice_notation)
    target = _dice_threshold_for_probability(probability, num_dice, num_sides)
    roll = roll_dice(seed, dice_notation)["total"]

    return {
        "success": roll >= target,
        "roll": roll,
        "target": target,
        "probability": probability,
        "seed": seed,
    }
