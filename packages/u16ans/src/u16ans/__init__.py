from __future__ import annotations

"""u16ans - codec entropique rANS pour symboles 16-bit (surface publique).

Contrat consommé par le harness `u16fuzz` :
  compress_u16 / decompress_u16 / count_u16, plus `guarded`, `is_error`,
  `error_name` pour observer les erreurs sans les propager.
"""

__version__ = "0.3.0"

from .errors import CodecError, ErrorCode, guarded, is_error, error_name
from .tables import (
    MAX_SYMBOL_VALUE,
    DEFAULT_TABLE_LOG,
    MIN_TABLE_LOG,
    MAX_TABLE_LOG,
    Histogram,
    count_u16,
)
from .rans_impl import compress_bound, compress_u16, decompress_u16
from .block import RAW_FMT, RLE_FMT, ANS_FMT, encode_block, decode_block, block_format

__all__ = [
    "__version__",
    "CodecError", "ErrorCode", "guarded", "is_error", "error_name",
    "MAX_SYMBOL_VALUE", "DEFAULT_TABLE_LOG", "MIN_TABLE_LOG", "MAX_TABLE_LOG",
    "Histogram", "count_u16",
    "compress_bound", "compress_u16", "decompress_u16",
    "RAW_FMT", "RLE_FMT", "ANS_FMT", "encode_block", "decode_block", "block_format",
]
