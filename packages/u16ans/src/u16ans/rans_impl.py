# packages/u16ans/src/u16ans/rans_impl.py
# -----------------------------------------------------------------------------
# rANS U16 - compression de symboles 16-bit (0..MAX_SYMBOL_VALUE)

from __future__ import annotations

import struct
from typing import List

import numpy as np

from .errors import CodecError, ErrorCode
from .tables import (
    MAX_SYMBOL_VALUE,
    MIN_TABLE_LOG,
    MAX_TABLE_LOG,
    as_u16,
    build_cdf,
    count_u16,
    normalize_counts,
    optimal_table_log,
)

"""
rANS U16 - tables embarquées
============================

But
----
Compresser une suite de symboles 16-bit (alphabet borné par `MAX_SYMBOL_VALUE`)
avec un ANS 32-bit déterministe. Contrairement au format ANS0 (tables
référencées par id), la description des fréquences normalisées est **écrite**
en tête du bloc compressé : le bloc est autonome.

Layout (little-endian)
----------------------
[0]       u8  table_log P
[1:3]     u16 max_symbol_value (plus grand symbole présent)
[3:5]     u16 n_present
[5:...]   n_present x (u16 symbol, u16 freq)   # symboles croissants
[...]     u32 nsym | u32 final_state | renorm chunks (16-bit LSB-first)

Valeurs de retour de `compress_u16`
-----------------------------------
- `len(src)` si `len(src) <= 1` (rien d'écrit)
- `1` si `src` ne contient qu'un seul symbole répété (RLE, rien d'écrit)
- `0` si le bloc ne serait pas plus petit que la source (rien d'écrit)
- sinon le nombre d'octets écrits dans `dst`

Les destinations sont des buffers numpy (ou bytearray) dont la **longueur est
la capacité** : aucune écriture au-delà, en succès comme en échec.
"""

__all__ = ["compress_bound", "compress_u16", "decompress_u16"]

_LE = "<"
_HEAD = struct.Struct(_LE + "B H H")
_PAIR = struct.Struct(_LE + "H H")
_STREAM_HEAD = struct.Struct(_LE + "I I")

_HEADER_BOUND = _HEAD.size + _PAIR.size * (MAX_SYMBOL_VALUE + 1) + _STREAM_HEAD.size


def compress_bound(size: int) -> int:
    """Taille maximale (octets) d'un bloc compressé pour `size` symboles."""
    return _HEADER_BOUND + 2 * int(size) + 16


def _out_u8(dst) -> np.ndarray:
    if isinstance(dst, np.ndarray):
        if dst.dtype != np.uint8:
            raise TypeError(f"dst must be a uint8 buffer, got dtype={dst.dtype}")
        return dst
    return np.frombuffer(dst, dtype=np.uint8)


def _out_u16(dst) -> np.ndarray:
    if not isinstance(dst, np.ndarray) or dst.dtype != np.uint16:
        raise TypeError("dst must be a numpy uint16 buffer")
    return dst


def _in_bytes(src) -> bytes:
    if isinstance(src, np.ndarray):
        return src.astype(np.uint8, copy=False).tobytes()
    return bytes(src)


# -----------------------------------------------------------------------------
# Core rANS 32-bit (renorm 16-bit)
# -----------------------------------------------------------------------------
def _rans_core_encode(symbols: List[int], freqs: List[int], cdf: List[int], P: int) -> bytes:
    """
    Encode rANS en produisant le flux core :
      stream = u32 nsym | u32 final_state | renorm_chunks (16-bit LSB-first)
    """
    # État initial bas (convention rANS 32-bit avec renorm 16-bit)
    x = 1 << 16
    chunks = bytearray()
    shift = 32 - P

    # Encode en ordre inverse
    for s in reversed(symbols):
        f = freqs[s]
        # Renormalisation encodeur : garantit x < 2^32 après l'étape core
        T = f << shift
        while x >= T:
            chunks.append(x & 0xFF)
            chunks.append((x >> 8) & 0xFF)
            x >>= 16
        x = ((x // f) << P) + (x % f) + cdf[s]

    return _STREAM_HEAD.pack(len(symbols), x) + bytes(chunks)


def _rans_core_decode(stream: bytes, freqs: List[int], cdf: List[int], P: int, nsym: int) -> List[int]:
    """Décode `nsym` symboles du flux core (en-tête nsym|state déjà validé)."""
    base = 1 << P
    x = int.from_bytes(stream[4:8], "little")
    renorm = stream[8:]

    if not ((1 << 16) <= x < (1 << 32)):
        raise CodecError(ErrorCode.CORRUPTION_DETECTED, "initial state out of range")

    # Inverse map L[r] -> symbol
    Lmap = [0] * base
    for i, f in enumerate(freqs):
        for r in range(cdf[i], cdf[i] + f):
            Lmap[r] = i

    res = [0] * nsym
    ptr = len(renorm)  # LIFO : on lit les chunks à rebours (fin -> début)
    mask = base - 1
    Tdec = 1 << 16

    for i in range(nsym):
        r = x & mask
        s = Lmap[r]
        res[i] = s
        x = freqs[s] * (x >> P) + (r - cdf[s])

        # Renormalisation décodeur
        while x < Tdec:
            if ptr < 2:
                raise CodecError(ErrorCode.CORRUPTION_DETECTED, "rANS stream underflow")
            ptr -= 2
            x = (x << 16) | (renorm[ptr + 1] << 8) | renorm[ptr]

    # Le flux doit être entièrement consommé et revenir à l'état initial
    if ptr != 0 or x != Tdec:
        raise CodecError(ErrorCode.CORRUPTION_DETECTED, "rANS stream not fully consumed")
    return res


# -----------------------------------------------------------------------------
# API publique
# -----------------------------------------------------------------------------
def compress_u16(dst, src, max_symbol_value: int = 0, table_log: int = 0) -> int:
    """
    Compresse `src` (symboles 16-bit) dans `dst` (uint8, capacité = len(dst)).

    max_symbol_value : borne de l'alphabet (0 -> MAX_SYMBOL_VALUE)
    table_log        : précision P des tables (0 -> DEFAULT_TABLE_LOG)

    Lève `CodecError` :
      - DST_SIZE_TOO_SMALL si le bloc ne tient pas dans `dst`
      - MAX_SYMBOL_VALUE_TOO_LARGE / _TOO_SMALL selon `count_u16`
      - TABLE_LOG_TOO_LARGE si `table_log > MAX_TABLE_LOG`
    """
    out = _out_u8(dst)
    arr = as_u16(src)
    n = int(arr.size)
    if n <= 1:
        return n

    hist = count_u16(arr, int(max_symbol_value) or MAX_SYMBOL_VALUE)
    if hist.max_count == n:
        return 1  # un seul symbole répété : RLE

    M = hist.max_symbol_value
    counts = hist.counts[: M + 1].tolist()
    present = [s for s in range(M + 1) if counts[s] > 0]
    P = optimal_table_log(table_log, n, len(present))
    freqs = normalize_counts(counts, P)
    cdf = build_cdf(freqs)

    head = bytearray(_HEAD.pack(P, M, len(present)))
    for s in present:
        head += _PAIR.pack(s, freqs[s])
    blob = bytes(head) + _rans_core_encode(arr.tolist(), freqs, cdf, P)

    # Non compressible : le caller stocke la source brute
    if len(blob) >= (n - 1) * 2:
        return 0
    if len(blob) > len(out):
        raise CodecError(ErrorCode.DST_SIZE_TOO_SMALL, f"need {len(blob)} bytes, capacity {len(out)}")
    out[: len(blob)] = np.frombuffer(blob, dtype=np.uint8)
    return len(blob)


def decompress_u16(dst, src) -> int:
    """
    Décompresse le bloc `src` (produit par `compress_u16`, taille > 1) dans
    `dst` (np.ndarray uint16, capacité = len(dst)). Retourne le nombre de symboles.

    Aucune écriture dans `dst` tant que le bloc n'est pas entièrement décodé ;
    jamais au-delà de `len(dst)`.

    Lève `CodecError` :
      - DST_SIZE_TOO_SMALL si `len(dst)` < longueur d'origine
      - SRC_SIZE_WRONG si le bloc est tronqué
      - CORRUPTION_DETECTED si l'en-tête ou le flux est incohérent
    """
    out = _out_u16(dst)
    blob = _in_bytes(src)

    if len(blob) < _HEAD.size:
        raise CodecError(ErrorCode.SRC_SIZE_WRONG, "block too short")
    P, M, n_present = _HEAD.unpack_from(blob, 0)
    if not (MIN_TABLE_LOG <= P <= MAX_TABLE_LOG):
        raise CodecError(ErrorCode.CORRUPTION_DETECTED, f"table_log out of range: {P}")
    if M > MAX_SYMBOL_VALUE or not (1 <= n_present <= M + 1):
        raise CodecError(ErrorCode.CORRUPTION_DETECTED, "invalid symbol table header")

    off = _HEAD.size
    if len(blob) < off + n_present * _PAIR.size + _STREAM_HEAD.size:
        raise CodecError(ErrorCode.SRC_SIZE_WRONG, "truncated table description")

    freqs = [0] * (M + 1)
    prev = -1
    for _ in range(n_present):
        s, f = _PAIR.unpack_from(blob, off)
        off += _PAIR.size
        if s <= prev or s > M or f == 0:
            raise CodecError(ErrorCode.CORRUPTION_DETECTED, "invalid table entry")
        freqs[s] = f
        prev = s
    if prev != M or sum(freqs) != (1 << P):
        raise CodecError(ErrorCode.CORRUPTION_DETECTED, "freqs must sum to (1<<table_log)")

    stream = blob[off:]
    nsym, _ = _STREAM_HEAD.unpack_from(stream, 0)
    if nsym > len(out):
        raise CodecError(ErrorCode.DST_SIZE_TOO_SMALL, f"need {nsym} symbols, capacity {len(out)}")

    res = _rans_core_decode(stream, freqs, build_cdf(freqs), P, nsym)
    out[:nsym] = res
    return nsym
