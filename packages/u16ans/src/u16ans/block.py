# packages/u16ans/src/u16ans/block.py
# -----------------------------------------------------------------------------
# Blocs auto-décrits U16 - tri-mode RAW / RLE / ANS
# Couvre les résultats "dégénérés" de compress_u16 (0 = brut, 1 = RLE) que le
# flux rANS seul ne sait pas représenter.

from __future__ import annotations

import struct

import numpy as np

from .errors import CodecError, ErrorCode
from .rans_impl import compress_bound, compress_u16, decompress_u16
from .tables import MAX_SYMBOL_VALUE, as_u16

__all__ = [
    "RAW_FMT", "RLE_FMT", "ANS_FMT",
    "encode_block", "decode_block", "block_format",
]

#: Format RAW : symboles u16 little-endian passants (source non compressible)
RAW_FMT: int = 0
#: Format RLE : un seul symbole u16 répété `nsym` fois
RLE_FMT: int = 1
#: Format ANS : bloc produit par `compress_u16` (tables embarquées)
ANS_FMT: int = 2

_LE = "<"
_BLOCK_HEAD = struct.Struct(_LE + "B I")  # fmt | nsym
_RLE_BODY = struct.Struct(_LE + "H")


def encode_block(src, max_symbol_value: int = 0, table_log: int = 0) -> bytes:
    """
    Encode `src` en bloc auto-décrit.

    Le format est choisi d'après le résultat de `compress_u16` :
      - 0 (non compressible) ou source vide -> RAW_FMT
      - 1 (symbole unique répété)           -> RLE_FMT
      - > 1                                 -> ANS_FMT

    Exceptions
    ----------
    CodecError si `compress_u16` échoue (ex: borne d'alphabet invalide).
    """
    arr = as_u16(src)
    n = int(arr.size)
    if n and int(arr.max()) > (int(max_symbol_value) or MAX_SYMBOL_VALUE):
        raise CodecError(ErrorCode.MAX_SYMBOL_VALUE_TOO_SMALL, "symbol above alphabet bound")

    scratch = np.empty(compress_bound(n), dtype=np.uint8)
    size = compress_u16(scratch, arr, max_symbol_value, table_log) if n else 0

    if size == 0:
        return _BLOCK_HEAD.pack(RAW_FMT, n) + arr.astype("<u2").tobytes()
    if size == 1:
        return _BLOCK_HEAD.pack(RLE_FMT, n) + _RLE_BODY.pack(int(arr[0]))
    return _BLOCK_HEAD.pack(ANS_FMT, n) + scratch[:size].tobytes()


def block_format(blob: bytes) -> int:
    """Lit le tag de format d'un bloc (RAW_FMT / RLE_FMT / ANS_FMT)."""
    if len(blob) < _BLOCK_HEAD.size:
        raise CodecError(ErrorCode.SRC_SIZE_WRONG, "block header truncated")
    return blob[0]


def decode_block(blob: bytes) -> np.ndarray:
    """
    Décode un bloc produit par `encode_block` -> np.ndarray[uint16].

    Exceptions
    ----------
    CodecError(SRC_SIZE_WRONG) si le bloc est tronqué,
    CodecError(CORRUPTION_DETECTED) si le tag de format est inconnu ou si la
    longueur décodée ne correspond pas à l'en-tête.
    """
    blob = bytes(blob)
    fmt = block_format(blob)
    _, n = _BLOCK_HEAD.unpack_from(blob, 0)
    body = blob[_BLOCK_HEAD.size:]

    if fmt == RAW_FMT:
        if len(body) != 2 * n:
            raise CodecError(ErrorCode.SRC_SIZE_WRONG, "raw block length mismatch")
        return np.frombuffer(body, dtype="<u2").astype(np.uint16)

    if fmt == RLE_FMT:
        if len(body) != _RLE_BODY.size:
            raise CodecError(ErrorCode.SRC_SIZE_WRONG, "rle block length mismatch")
        (sym,) = _RLE_BODY.unpack(body)
        return np.full(n, sym, dtype=np.uint16)

    if fmt == ANS_FMT:
        out = np.empty(n, dtype=np.uint16)
        got = decompress_u16(out, body)
        if got != n:
            raise CodecError(ErrorCode.CORRUPTION_DETECTED, f"decoded {got} symbols, expected {n}")
        return out

    raise CodecError(ErrorCode.CORRUPTION_DETECTED, f"unknown block format: {fmt}")
