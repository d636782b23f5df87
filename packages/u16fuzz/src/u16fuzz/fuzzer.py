# packages/u16fuzz/src/u16fuzz/fuzzer.py
# -----------------------------------------------------------------------------
# Boucle de fuzzing round-trip (compress / decompress U16)

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np

from u16ans import (
    MAX_SYMBOL_VALUE,
    compress_bound,
    compress_u16,
    decode_block,
    decompress_u16,
    encode_block,
    error_name,
    guarded,
    is_error,
)

from .checks import CheckFailed, RunReport, TestContext
from .common import Reporter
from .config import FuzzConfig, SAFETY_MARGIN
from .fingerprint import fingerprint
from .generator import generate_u16
from .rng import FuzzRandom, replay
from .scratch import GuardedBuffer
from .timing import TimingGate

"""
Déroulé d'une itération
-----------------------
1. seed locale = seed ^ 0xEDA5B371, puis la seed globale avance d'un pas.
2. longueur L ∈ [1, mask+1], offset tel que [offset, offset+L+64) reste dans le buffer.
3. empreinte 64-bit de la tranche.
4. compress_u16 dans le scratch compressé (dimensionné au pire cas).
5. si taille compressée > 1 :
     - capacité exacte L      -> succès, sentinelle intacte, empreinte égale
     - capacité L + [1..32]   -> succès, empreinte égale
     - capacité L - [1..32]   -> échec obligatoire, sentinelle intacte
   sinon (0 = brut, 1 = RLE) : vérification via encode_block / decode_block.
6. premier échec -> arrêt, rapporté avec (seed d'origine, numéro de test).
"""

__all__ = ["RoundPlan", "iter_rounds", "FuzzSession", "fuzz_tests"]

_SLACK_MASK = 31

_OVERRUN = "decompress_u16 overrun output buffer (write beyond specified end) !"


@dataclass(frozen=True)
class RoundPlan:
    test_nb: int
    round_seed: int
    size: int
    offset: int


def iter_rounds(start_seed: int, total: int, start_test_nb: int,
                cfg: FuzzConfig) -> Iterator[Tuple[RoundPlan, FuzzRandom]]:
    """
    Plans d'itérations [start_test_nb, total) et le générateur local de chacune.

    La reprise à `start_test_nb` rejoue la seed globale : le plan N est identique
    à celui qu'atteint un run ininterrompu.
    """
    rnd = FuzzRandom(replay(start_seed, start_test_nb))
    span = cfg.buffer_size - SAFETY_MARGIN - cfg.max_test_size_mask
    for test_nb in range(start_test_nb, total):
        local = rnd.fork()
        round_seed = local.state
        size = (local.next() & cfg.max_test_size_mask) + 1
        offset = local.next() % span
        yield RoundPlan(test_nb, round_seed, size, offset), local


class FuzzSession:
    """Possède le buffer de symboles (lecture seule) et les scratch réutilisés."""

    def __init__(self, cfg: FuzzConfig, symbols: np.ndarray, reporter: Reporter) -> None:
        if len(symbols) < cfg.buffer_size:
            raise ValueError("symbols buffer shorter than cfg.buffer_size")
        self.cfg = cfg
        self.symbols = symbols
        self.reporter = reporter
        self.compressed = np.zeros(compress_bound(cfg.max_test_size), dtype=np.uint8)
        self.verif = GuardedBuffer(cfg.max_test_size + SAFETY_MARGIN)

    def _tag(self, ctx: TestContext, what: str) -> None:
        if self.reporter.tracing:
            self.reporter.display(4, "test %5d : %s", ctx.test_nb, what)

    def _decompress(self, capacity: int, blob: np.ndarray):
        return guarded(decompress_u16, self.verif.arm(capacity), blob)

    def run_round(self, ctx: TestContext, plan: RoundPlan, rnd: FuzzRandom) -> int:
        """Exécute une itération ; lève CheckFailed au premier écart. Retourne la taille compressée."""
        size = plan.size
        src = self.symbols[plan.offset:plan.offset + size]
        hash_orig = fingerprint(src)

        self._tag(ctx, "compress")
        c_size = guarded(compress_u16, self.compressed, src, MAX_SYMBOL_VALUE, self.cfg.table_log)
        ctx.check(not is_error(c_size), "compress_u16 failed : %s", error_name(c_size))

        if c_size <= 1:
            # 0 = non compressible, 1 = RLE : pas de flux rANS à décoder
            if self.cfg.check_degenerate:
                self._check_degenerate(ctx, src, hash_orig)
            return c_size

        blob = self.compressed[:c_size]

        # Capacité exacte : doit réussir
        self._tag(ctx, "exact capacity")
        result = self._decompress(size, blob)
        ctx.check(self.verif.intact(), _OVERRUN)
        ctx.check(not is_error(result),
                  "decompress_u16 failed : %s ! (origSize = %d shorts, cSize = %d bytes)",
                  error_name(result), size, c_size)
        ctx.check(fingerprint(self.verif.head(result)) == hash_orig, "Decompressed data corrupted !!")

        # Capacité plus grande que nécessaire : doit réussir
        self._tag(ctx, "oversized capacity")
        result = self._decompress(size + (rnd.next() & _SLACK_MASK) + 1, blob)
        ctx.check(self.verif.intact(), _OVERRUN)
        ctx.check(not is_error(result),
                  "decompress_u16 failed : %s ! (origSize = %d shorts, cSize = %d bytes)",
                  error_name(result), size, c_size)
        ctx.check(fingerprint(self.verif.head(result)) == hash_orig, "Decompressed data corrupted !!")

        # Capacité trop petite : doit échouer sans déborder
        self._tag(ctx, "undersized capacity")
        shrink = (rnd.next() & _SLACK_MASK) + 1
        if shrink >= size:
            shrink = 1
        dst_size = size - shrink
        result = self._decompress(dst_size, blob)
        ctx.check(self.verif.intact(), _OVERRUN)
        ctx.check(is_error(result),
                  "decompress_u16 should have failed ! (origSize = %d shorts, dstSize = %d shorts)",
                  size, dst_size)
        return c_size

    def _check_degenerate(self, ctx: TestContext, src: np.ndarray, hash_orig: int) -> None:
        self._tag(ctx, "degenerate block")
        blob = guarded(encode_block, src, MAX_SYMBOL_VALUE, self.cfg.table_log)
        ctx.check(not is_error(blob), "encode_block failed : %s", error_name(blob))
        back = guarded(decode_block, blob)
        ctx.check(not is_error(back), "decode_block failed : %s", error_name(back))
        ctx.check(len(back) == len(src) and fingerprint(back) == hash_orig,
                  "Degenerate block corrupted !!")


def fuzz_tests(start_seed: int, total: int, start_test_nb: int, cfg: FuzzConfig,
               reporter: Reporter, symbols: Optional[np.ndarray] = None) -> RunReport:
    """
    Boucle principale. Le buffer de symboles est généré depuis `start_seed`
    (avant toute reprise), sauf s'il est fourni.
    """
    if start_test_nb < 0 or total < 0:
        raise ValueError("test numbers must be >= 0")
    if symbols is None:
        symbols = generate_u16(cfg.buffer_size, cfg.skew, start_seed)

    session = FuzzSession(cfg, symbols, reporter)
    gate = TimingGate(cfg.update_rate_ms)
    ctx = TestContext(seed=int(start_seed))
    done = 0
    try:
        for plan, rnd in iter_rounds(start_seed, total, start_test_nb, cfg):
            ctx.test_nb = plan.test_nb
            if reporter.tracing:
                reporter.display(4, "test %5d : offset %d, size %d", plan.test_nb, plan.offset, plan.size)
            elif gate.ready():
                reporter.display(2, "test %5d", plan.test_nb)
            session.run_round(ctx, plan, rnd)
            done += 1
    except CheckFailed as e:
        return RunReport(tests_run=done, failure=e.failure)
    return RunReport(tests_run=done)
