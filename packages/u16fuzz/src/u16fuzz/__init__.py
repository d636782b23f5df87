from __future__ import annotations

"""u16fuzz - harness de fuzzing round-trip pour le codec U16 (`u16ans`).

Expose la config et les runners ; le CLI (`fuzzer-u16`) est le seul point
qui termine le process.
"""

__version__ = "0.3.0"

from .config import FuzzConfig
from .checks import Failure, RunReport, TestContext
from .common import Reporter
from .rng import FuzzRandom, fuz_rand, replay, round_seed
from .generator import build_symbol_table, generate_u16
from .fuzzer import RoundPlan, iter_rounds, fuzz_tests
from .unit import unit_tests

__all__ = [
    "__version__",
    "FuzzConfig", "Failure", "RunReport", "TestContext", "Reporter",
    "FuzzRandom", "fuz_rand", "replay", "round_seed",
    "build_symbol_table", "generate_u16",
    "RoundPlan", "iter_rounds", "fuzz_tests", "unit_tests",
]
