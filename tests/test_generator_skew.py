from __future__ import annotations
import numpy as np
import pytest

from u16ans import MAX_SYMBOL_VALUE
from u16fuzz.generator import FIRST_SYMBOL, PROBA_TABLE_SIZE, build_symbol_table, generate_u16


def test_symbol_table_shape_and_first_run():
    t = build_symbol_table(0.08)
    assert len(t) == PROBA_TABLE_SIZE
    # premier symbole : int(4096 * 0.08) + 1 cases
    assert t.count(FIRST_SYMBOL) == int(PROBA_TABLE_SIZE * 0.08) + 1
    assert t[0] == FIRST_SYMBOL
    assert all(1 <= s < MAX_SYMBOL_VALUE for s in t)


def test_symbol_table_is_declining():
    t = build_symbol_table(0.08)
    counts = [t.count(FIRST_SYMBOL + k) for k in range(10)]
    assert counts == sorted(counts, reverse=True)
    assert counts[0] > counts[9]


def test_symbol_table_wraps_before_max():
    # table assez grande et p faible : l'id doit repartir à 1
    t = build_symbol_table(0.001, table_size=1 << 16, first_symbol=MAX_SYMBOL_VALUE - 3)
    assert 1 in t
    assert max(t) < MAX_SYMBOL_VALUE


@pytest.mark.parametrize("size", [0, 1000, 4095])
def test_symbol_table_rejects_non_power_of_two(size):
    with pytest.raises(ValueError):
        build_symbol_table(0.08, table_size=size)


def test_symbol_table_rejects_bad_p():
    with pytest.raises(ValueError):
        build_symbol_table(1.0)


def test_generate_deterministic_and_readonly():
    a = generate_u16(20000, 0.08, 1234)
    b = generate_u16(20000, 0.08, 1234)
    c = generate_u16(20000, 0.08, 1235)
    assert a.dtype == np.uint16 and a.shape == (20000,)
    assert np.array_equal(a, b)
    assert not np.array_equal(a, c)
    assert not a.flags.writeable
    with pytest.raises(ValueError):
        a[0] = 0


def test_generate_is_skewed():
    a = generate_u16(50000, 0.08, 7)
    counts = np.bincount(a)
    # le symbole de départ domine, loin d'une distribution uniforme
    assert int(counts.argmax()) == FIRST_SYMBOL
    assert counts[FIRST_SYMBOL] / a.size > 0.05
    assert np.count_nonzero(counts) < 200
