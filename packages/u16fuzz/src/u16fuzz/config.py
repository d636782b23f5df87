# packages/u16fuzz/src/u16fuzz/config.py
from __future__ import annotations
import os
from dataclasses import dataclass

from u16ans import DEFAULT_TABLE_LOG, MIN_TABLE_LOG, MAX_TABLE_LOG

from .timing import UPDATE_RATE_MS

__all__ = ["FuzzConfig", "BUFFER_SIZE", "NB_TESTS", "MAX_TEST_SIZE_MASK", "SAFETY_MARGIN"]

BUFFER_SIZE = (1 << 20) - 1
NB_TESTS = 32 * 1024
MAX_TEST_SIZE_MASK = 0x1FFFF
SAFETY_MARGIN = 64


@dataclass(frozen=True, slots=True)
class FuzzConfig:
    """
    Configuration d'un run du fuzzer U16.

    Champs
    ------
    buffer_size : int, default=(1<<20)-1
        Nombre de symboles du buffer généré (unique, immuable pendant le run).
    max_test_size_mask : int, default=0x1FFFF
        Masque de tirage de la longueur des tranches : L ∈ [1, mask+1].
        Doit être de la forme 2^k - 1.
    nb_tests : int, default=32768
        Nombre total d'itérations si `-i` n'est pas donné.
    table_log : int, default=12
        Précision passée à `compress_u16`.
    skew : float, default=0.08
        Fraction `p` du générateur de symboles (distribution décroissante).
    update_rate_ms : int, default=200
        Période minimale entre deux affichages de progression.
    check_degenerate : bool, default=True
        Vérifie aussi les tailles compressées 0/1 via la couche bloc.

    Notes
    -----
    Les validations lèvent `ValueError` ; aucune conversion silencieuse.
    """

    buffer_size: int = BUFFER_SIZE
    max_test_size_mask: int = MAX_TEST_SIZE_MASK
    nb_tests: int = NB_TESTS
    table_log: int = DEFAULT_TABLE_LOG
    skew: float = 0.08
    update_rate_ms: int = UPDATE_RATE_MS
    check_degenerate: bool = True

    def __post_init__(self) -> None:
        mask = int(self.max_test_size_mask)
        if mask <= 0 or mask & (mask + 1):
            raise ValueError("FuzzConfig.max_test_size_mask must be of the form 2^k - 1")
        if self.buffer_size <= SAFETY_MARGIN + mask:
            raise ValueError("FuzzConfig.buffer_size must exceed max_test_size_mask + 64")
        if self.nb_tests < 0:
            raise ValueError("FuzzConfig.nb_tests must be >= 0")
        if not (MIN_TABLE_LOG <= int(self.table_log) <= MAX_TABLE_LOG):
            raise ValueError(f"FuzzConfig.table_log must be in [{MIN_TABLE_LOG}..{MAX_TABLE_LOG}]")
        if not (0.0 < float(self.skew) < 1.0):
            raise ValueError("FuzzConfig.skew must be in ]0,1[")
        if self.update_rate_ms < 0:
            raise ValueError("FuzzConfig.update_rate_ms must be >= 0")

    @property
    def max_test_size(self) -> int:
        return self.max_test_size_mask + 1

    @staticmethod
    def from_env() -> "FuzzConfig":
        """
        Surcharges par ENV (pour des runs plus courts sans nouveaux flags) :

        U16FUZZ_BUFFER_SIZE       → buffer_size
        U16FUZZ_MAX_TEST_LOG      → max_test_size_mask = 2^log - 1
        U16FUZZ_TABLE_LOG         → table_log
        U16FUZZ_SKEW              → skew
        U16FUZZ_CHECK_DEGENERATE  → "0" désactive la vérif des tailles 0/1
        """
        kw: dict = {}
        v = os.getenv("U16FUZZ_BUFFER_SIZE")
        if v:
            kw["buffer_size"] = int(v)
        v = os.getenv("U16FUZZ_MAX_TEST_LOG")
        if v:
            kw["max_test_size_mask"] = (1 << int(v)) - 1
        v = os.getenv("U16FUZZ_TABLE_LOG")
        if v:
            kw["table_log"] = int(v)
        v = os.getenv("U16FUZZ_SKEW")
        if v:
            kw["skew"] = float(v)
        v = os.getenv("U16FUZZ_CHECK_DEGENERATE")
        if v:
            kw["check_degenerate"] = v.strip().lower() not in ("0", "false", "no", "off")
        return FuzzConfig(**kw)
