from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

__all__ = ["Failure", "RunReport", "CheckFailed", "TestContext"]


@dataclass(frozen=True)
class Failure:
    seed: int
    test_nb: int
    message: str

    def __str__(self) -> str:
        return f"Error => {self.message} (seed {self.seed}, test nb {self.test_nb})"


@dataclass(frozen=True)
class RunReport:
    """Outcome of a runner; only the CLI decides what to do with a failure."""

    tests_run: int
    failure: Optional[Failure] = None

    @property
    def passed(self) -> bool:
        return self.failure is None


class CheckFailed(Exception):
    def __init__(self, failure: Failure) -> None:
        super().__init__(str(failure))
        self.failure = failure


@dataclass
class TestContext:
    """Originating seed + current iteration, used only to report failures."""

    __test__ = False  # not a pytest class

    seed: int
    test_nb: int = 0

    def check(self, ok: bool, msg: str, *args) -> None:
        if not ok:
            raise CheckFailed(Failure(self.seed, self.test_nb, msg % args if args else msg))
