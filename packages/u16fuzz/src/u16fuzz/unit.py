from __future__ import annotations

import numpy as np

from u16ans import MAX_SYMBOL_VALUE, count_u16, error_name, guarded, is_error

from .checks import CheckFailed, RunReport, TestContext
from .common import Reporter

__all__ = ["TB_SIZE", "cyclic_buffer", "unit_tests"]

TB_SIZE = 16 * 1024


def cyclic_buffer(size: int = TB_SIZE) -> np.ndarray:
    """0, 1, ..., MAX_SYMBOL_VALUE, 0, 1, ... sur `size` cases."""
    return (np.arange(size) % (MAX_SYMBOL_VALUE + 1)).astype(np.uint16)


def unit_tests(reporter: Reporter, size: int = TB_SIZE) -> RunReport:
    """
    Contrat de la borne passée à `count_u16` :
      (a) borne == MAX_SYMBOL_VALUE     -> succès, somme des comptes == size
      (b) borne == MAX_SYMBOL_VALUE + 1 -> échec (trop grande pour le codec)
      (c) borne == MAX_SYMBOL_VALUE - 1 -> échec (sous le max réellement présent)
    """
    if size <= MAX_SYMBOL_VALUE:
        raise ValueError(f"size must cover the whole alphabet (> {MAX_SYMBOL_VALUE})")

    ctx = TestContext(seed=0, test_nb=0)
    buf = cyclic_buffer(size)
    try:
        r = guarded(count_u16, buf, MAX_SYMBOL_VALUE)
        ctx.check(not is_error(r), "count_u16() should have worked : %s", error_name(r))
        total = int(r.counts.sum())
        ctx.check(total == size, "count_u16() counts sum to %d instead of %d", total, size)

        r = guarded(count_u16, buf, MAX_SYMBOL_VALUE + 1)
        ctx.check(is_error(r), "count_u16() should have failed : max too large")

        r = guarded(count_u16, buf, MAX_SYMBOL_VALUE - 1)
        ctx.check(is_error(r), "count_u16() should have failed : max too low")
    except CheckFailed as e:
        return RunReport(tests_run=0, failure=e.failure)

    reporter.display(2, "Unit tests completed")
    return RunReport(tests_run=3)
