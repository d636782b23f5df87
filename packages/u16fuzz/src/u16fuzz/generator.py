from __future__ import annotations
from typing import List

import numpy as np

from u16ans import MAX_SYMBOL_VALUE
from .rng import fuz_rand

__all__ = ["PROBA_TABLE_SIZE", "FIRST_SYMBOL", "build_symbol_table", "generate_u16"]

PROBA_TABLE_SIZE = 4096
FIRST_SYMBOL = 240


def build_symbol_table(p: float, table_size: int = PROBA_TABLE_SIZE,
                       first_symbol: int = FIRST_SYMBOL,
                       max_symbol_value: int = MAX_SYMBOL_VALUE) -> List[int]:
    """
    Table de tirage (taille puissance de 2) à distribution décroissante.

    Le symbole courant reçoit `int(remaining * p) + 1` cases, puis on passe au
    suivant ; l'id repart à 1 avant d'atteindre `max_symbol_value`.
    Les premiers symboles concentrent l'essentiel de la masse (quasi géométrique).
    """
    if table_size <= 0 or table_size & (table_size - 1):
        raise ValueError(f"table_size must be a power of two, got {table_size}")
    if not (0.0 < p < 1.0):
        raise ValueError(f"p must be in ]0,1[, got {p}")
    if not (1 <= first_symbol < max_symbol_value):
        raise ValueError("first_symbol must satisfy 1 <= first_symbol < max_symbol_value")

    table = [0] * table_size
    remaining = table_size
    pos = 0
    sym = first_symbol
    while remaining:
        n = int(remaining * p) + 1
        end = pos + n
        table[pos:end] = [sym] * n
        pos = end
        sym += 1
        if sym >= max_symbol_value:
            sym = 1
        remaining -= n
    return table


def generate_u16(size: int, p: float, seed: int, table_size: int = PROBA_TABLE_SIZE,
                 first_symbol: int = FIRST_SYMBOL,
                 max_symbol_value: int = MAX_SYMBOL_VALUE) -> np.ndarray:
    """
    Buffer de `size` symboles 16-bit tirés dans `build_symbol_table(...)`.

    Entièrement déterminé par `seed` ; le tableau retourné est en lecture seule.
    """
    table = build_symbol_table(p, table_size, first_symbol, max_symbol_value)
    mask = table_size - 1
    out = [0] * int(size)
    state = int(seed) & 0xFFFFFFFF
    for i in range(int(size)):
        state, r = fuz_rand(state)
        out[i] = table[r & mask]
    arr = np.array(out, dtype=np.uint16)
    arr.flags.writeable = False
    return arr
