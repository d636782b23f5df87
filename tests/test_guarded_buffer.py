from __future__ import annotations
import numpy as np
import pytest

from u16fuzz.scratch import SENTINEL, GuardedBuffer


def test_arm_returns_exact_view_and_places_sentinel():
    g = GuardedBuffer(64)
    v = g.arm(10)
    assert v.dtype == np.uint16 and len(v) == 10
    assert g.intact()
    v[:] = 7  # écrire dans la vue ne touche pas la sentinelle
    assert g.intact()
    assert list(g.head(10)) == [7] * 10


def test_overrun_is_detected():
    g = GuardedBuffer(64)
    v = g.arm(10)
    v.base[10] = 0  # écriture juste après la frontière déclarée
    assert not g.intact()


def test_rearm_moves_boundary():
    g = GuardedBuffer(64)
    g.arm(10)
    v = g.arm(5)
    assert len(v) == 5 and g.intact()
    assert int(g.head(11)[10]) == SENTINEL  # ancienne sentinelle laissée en place


@pytest.mark.parametrize("size", [-1, 65])
def test_arm_out_of_range(size):
    with pytest.raises(ValueError):
        GuardedBuffer(64).arm(size)


def test_intact_before_arm():
    with pytest.raises(RuntimeError):
        GuardedBuffer(8).intact()


def test_full_capacity_is_allowed():
    g = GuardedBuffer(8)
    assert len(g.arm(8)) == 8 and g.intact()
