"""
Deterministic pseudo-random stream shared by every generation stage.

The stream is a 32-bit add / xorshift-multiply / xorshift avalanche
(mulberry32 family). All arithmetic is masked to 32 bits, so a given seed
produces the same sequence on every platform and interpreter.
"""

import math
from typing import Sequence, Tuple

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0

# Per-consumer salts keep the growth, placement and archetype streams apart
# even when they are driven by the same integer seed.
SKELETON_SALT = 0x7F4A7C15
PLACEMENT_SALT = 0x9E3779B9
ARCHETYPE_SALT = 0x85EBCA6B


def seed_state(seed: int, salt: int = 0) -> int:
    """Map an integer seed and salt to an initial 32-bit state."""
    return (int(math.floor(seed)) ^ salt) & _MASK32


def next_float(state: int) -> Tuple[float, int]:
    """
    Advance ``state`` by one step.

    Returns
    -------
    value : float
        Uniform float in [0, 1)
    new_state : int
        State to pass to the next call
    """
    state = (state + _INCREMENT) & _MASK32
    t = ((state ^ (state >> 15)) * (1 | state)) & _MASK32
    t ^= (t + (((t ^ (t >> 7)) * (61 | t)) & _MASK32)) & _MASK32
    t = (t ^ (t >> 14)) & _MASK32
    return t / _TWO_POW_32, state


class DeterministicRng:
    """Seeded float stream with explicit, inspectable state."""

    def __init__(self, seed: int, salt: int = 0):
        """
        Initialize the stream.

        Parameters
        ----------
        seed : int
            Integer seed
        salt : int
            Per-consumer salt mixed into the seed
        """
        self.seed = seed
        self.salt = salt
        self.state = seed_state(seed, salt)
        self.draws = 0

    def random(self) -> float:
        """Next float in [0, 1)."""
        value, self.state = next_float(self.state)
        self.draws += 1
        return value

    def uniform(self, low: float, high: float) -> float:
        """Next float in [low, high)."""
        return low + (high - low) * self.random()

    def range_lerp(self, value_range: Sequence[float]) -> float:
        """Interpolate a (min, max) range with the next draw."""
        return self.uniform(value_range[0], value_range[1])

    def randint(self, upper: int) -> int:
        """Next integer in [0, upper)."""
        return int(math.floor(self.random() * upper))

    def get_state(self) -> dict:
        """Get current state for serialization."""
        return {
            "seed": self.seed,
            "salt": self.salt,
            "state": self.state,
            "draws": self.draws,
        }

    def set_state(self, state: dict) -> None:
        """Restore state from serialization."""
        self.seed = state["seed"]
        self.salt = state["salt"]
        self.state = state["state"]
        self.draws = state.get("draws", 0)
