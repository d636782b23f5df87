from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

_MASK32 = 0xFFFFFFFF

PRIME1 = 2654435761
PRIME2 = 2246822519
ROUND_SEED_SALT = 0xEDA5B371


def fuz_rand(state: int) -> Tuple[int, int]:
    """One LCG step: returns (next_state, value).

    next_state = state * PRIME1 + PRIME2 (mod 2^32), value = next_state >> 11.
    Bit-exact, so a seed printed by a failing run replays the same stream.
    """
    state = (int(state) * PRIME1 + PRIME2) & _MASK32
    return state, state >> 11


def round_seed(seed: int) -> int:
    """Round-local seed, decorrelated from the stream that advances `seed`."""
    return (int(seed) ^ ROUND_SEED_SALT) & _MASK32


def replay(seed: int, steps: int) -> int:
    """State reached after `steps` calls to `fuz_rand` from `seed`."""
    state = int(seed) & _MASK32
    for _ in range(int(steps)):
        state, _ = fuz_rand(state)
    return state


@dataclass
class FuzzRandom:
    state: int

    def __post_init__(self) -> None:
        self.state = int(self.state) & _MASK32

    def next(self) -> int:
        self.state, value = fuz_rand(self.state)
        return value

    def fork(self) -> "FuzzRandom":
        """Round-local generator for the current state, then advance this one."""
        child = FuzzRandom(round_seed(self.state))
        self.next()
        return child
