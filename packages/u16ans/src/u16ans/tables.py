# packages/u16ans/src/u16ans/tables.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .errors import CodecError, ErrorCode

__all__ = [
    "MAX_SYMBOL_VALUE",
    "DEFAULT_TABLE_LOG",
    "MIN_TABLE_LOG",
    "MAX_TABLE_LOG",
    "Histogram",
    "as_u16",
    "count_u16",
    "optimal_table_log",
    "normalize_counts",
    "build_cdf",
]

# Alphabet 16-bit supporté : symboles 0..286 inclus
MAX_SYMBOL_VALUE = 286

# Précision des tables (freqs sur u16 => base <= 32768)
DEFAULT_TABLE_LOG = 12
MIN_TABLE_LOG = 5
MAX_TABLE_LOG = 15


@dataclass(frozen=True)
class Histogram:
    """
    Résultat de `count_u16`.

    counts : np.ndarray[int64], longueur `bound + 1`
    max_symbol_value : plus grand symbole effectivement présent
    max_count : effectif du symbole le plus fréquent
    """
    counts: np.ndarray
    max_symbol_value: int
    max_count: int


def as_u16(src) -> np.ndarray:
    """Vue `uint16` 1-D de `src` (copie seulement si le dtype diffère)."""
    arr = np.asarray(src)
    if arr.dtype != np.uint16:
        if arr.size and not np.issubdtype(arr.dtype, np.integer):
            raise TypeError(f"expected 16-bit integer symbols, got dtype={arr.dtype}")
        arr = arr.astype(np.uint16)
    return arr.reshape(-1)


def count_u16(src, max_symbol_value: int) -> Histogram:
    """
    Histogramme des symboles de `src` borné par `max_symbol_value` (fourni par l'appelant).

    Contrat de la borne
    -------------------
    - `max_symbol_value > MAX_SYMBOL_VALUE` -> CodecError(MAX_SYMBOL_VALUE_TOO_LARGE)
    - un symbole de `src` dépasse la borne   -> CodecError(MAX_SYMBOL_VALUE_TOO_SMALL)

    Le comptage ne sous-estime jamais : aucune troncature silencieuse.
    """
    bound = int(max_symbol_value)
    if bound > MAX_SYMBOL_VALUE:
        raise CodecError(ErrorCode.MAX_SYMBOL_VALUE_TOO_LARGE, f"{bound} > {MAX_SYMBOL_VALUE}")
    if bound < 0:
        raise ValueError(f"max_symbol_value must be >= 0, got {bound}")

    arr = as_u16(src)
    if arr.size == 0:
        return Histogram(np.zeros(bound + 1, dtype=np.int64), 0, 0)

    actual = int(arr.max())
    if actual > bound:
        raise CodecError(ErrorCode.MAX_SYMBOL_VALUE_TOO_SMALL, f"symbol {actual} > {bound}")

    counts = np.bincount(arr, minlength=bound + 1).astype(np.int64)
    return Histogram(counts, actual, int(counts.max()))


def optimal_table_log(table_log: int, src_size: int, n_present: int) -> int:
    """
    Choisit la précision P effective.

    - `table_log == 0` -> DEFAULT_TABLE_LOG
    - réduite pour les petites sources (inutile d'avoir base >> src_size)
    - relevée pour que chaque symbole présent reçoive au moins 1 slot
    """
    P = int(table_log) or DEFAULT_TABLE_LOG
    if P > MAX_TABLE_LOG:
        raise CodecError(ErrorCode.TABLE_LOG_TOO_LARGE, f"{P} > {MAX_TABLE_LOG}")
    max_bits_src = (max(1, int(src_size)) - 1).bit_length() - 2
    if max_bits_src < P:
        P = max_bits_src
    min_log = max(MIN_TABLE_LOG, (max(1, int(n_present)) - 1).bit_length() + 1)
    return min(max(P, min_log), MAX_TABLE_LOG)


def normalize_counts(counts: List[int], table_log: int) -> List[int]:
    """
    Convertit un histogramme `counts` en fréquences entières de somme `base = 1<<P`,
    en garantissant au moins 1 pour chaque symbole présent (absents -> 0).
    Stratégie : “largest remainder” + corrections déterministes.
    """
    n = len(counts)
    base = 1 << int(table_log)
    total = sum(counts)
    if total <= 0:
        raise ValueError("cannot normalize an empty histogram")
    if sum(1 for h in counts if h > 0) > base:
        raise ValueError(f"too many distinct symbols for table_log={table_log}")

    alloc = [0] * n
    remainders: List[Tuple[float, int]] = []
    s = 0
    for i, h in enumerate(counts):
        if h <= 0:
            continue
        f = (h * base) / total
        q = int(f)
        if q == 0:
            q = 1  # symbole présent => au moins 1
        alloc[i] = q
        s += q
        remainders.append((f - q, i))

    # Trop : on retire aux plus petites fractions, puis aux plus grosses cases
    if s > base:
        remainders.sort(key=lambda x: (x[0], counts[x[1]]))
        for _, sym in remainders:
            if s <= base:
                break
            if alloc[sym] > 1:
                alloc[sym] -= 1
                s -= 1
        order = sorted(range(n), key=lambda k: alloc[k], reverse=True)
        j = 0
        while s > base:
            k = order[j % n]
            if alloc[k] > 1:
                alloc[k] -= 1
                s -= 1
            j += 1

    # Pas assez : on ajoute aux plus grandes fractions, puis aux plus fréquents
    if s < base:
        remainders.sort(key=lambda x: (-x[0], -counts[x[1]]))
        for _, sym in remainders:
            if s >= base:
                break
            alloc[sym] += 1
            s += 1
        if s < base:
            top = max(range(n), key=lambda k: counts[k])
            alloc[top] += base - s
            s = base

    return alloc


def build_cdf(freqs: List[int]) -> List[int]:
    """CDF de taille len(freqs)+1 (cdf[-1] == base)."""
    cdf = [0] * (len(freqs) + 1)
    acc = 0
    for i, f in enumerate(freqs):
        cdf[i] = acc
        acc += int(f)
    cdf[len(freqs)] = acc
    return cdf
