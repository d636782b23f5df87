# packages/u16ans/src/u16ans/errors.py
from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable

__all__ = ["ErrorCode", "CodecError", "guarded", "is_error", "error_name"]


class ErrorCode(IntEnum):
    """Codes d'erreur du codec (stables, utilisés pour le diagnostic)."""

    GENERIC = 1
    DST_SIZE_TOO_SMALL = 2
    SRC_SIZE_WRONG = 3
    CORRUPTION_DETECTED = 4
    TABLE_LOG_TOO_LARGE = 5
    MAX_SYMBOL_VALUE_TOO_LARGE = 6
    MAX_SYMBOL_VALUE_TOO_SMALL = 7


_NAMES = {
    ErrorCode.GENERIC: "Error (generic)",
    ErrorCode.DST_SIZE_TOO_SMALL: "Destination buffer is too small",
    ErrorCode.SRC_SIZE_WRONG: "Src size incorrect",
    ErrorCode.CORRUPTION_DETECTED: "Corrupted block detected",
    ErrorCode.TABLE_LOG_TOO_LARGE: "tableLog requires too much memory",
    ErrorCode.MAX_SYMBOL_VALUE_TOO_LARGE: "Unsupported max possible Symbol Value : too large",
    ErrorCode.MAX_SYMBOL_VALUE_TOO_SMALL: "Specified maxSymbolValue is too small",
}


class CodecError(ValueError):
    """Erreur signalée par le codec (porte un `ErrorCode`)."""

    def __init__(self, code: ErrorCode, detail: str = "") -> None:
        self.code = ErrorCode(code)
        self.detail = detail
        msg = _NAMES[self.code]
        super().__init__(f"{msg}: {detail}" if detail else msg)


def guarded(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """
    Appelle un point d'entrée du codec et retourne soit son résultat,
    soit la `CodecError` levée (retournée, pas propagée).
    Les autres exceptions (mauvais usage) remontent.
    """
    try:
        return fn(*args, **kwargs)
    except CodecError as e:
        return e


def is_error(result: object) -> bool:
    return isinstance(result, CodecError)


def error_name(result: object) -> str:
    """Nom lisible d'un résultat d'erreur ("No error detected" sinon)."""
    if isinstance(result, CodecError):
        return _NAMES[result.code]
    return "No error detected"
