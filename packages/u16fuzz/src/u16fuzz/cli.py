from __future__ import annotations
import argparse, struct, sys, time
from pathlib import Path

from .common import DISPLAY_LEVEL, VERBOSE_LEVEL, Reporter, setup_logging
from .config import FuzzConfig
from .fuzzer import fuzz_tests
from .unit import unit_tests


def default_seed() -> int:
    """Non reproductible : dérivée de l'horloge (ms) quand `-s` n'est pas donné."""
    return int(time.time() * 1000) % 10000


def parse_args(argv=None, cfg: FuzzConfig | None = None):
    cfg = cfg or FuzzConfig()
    p = argparse.ArgumentParser(prog="fuzzer-u16",
                                description="U16 rANS — automated round-trip / buffer-safety test")
    p.add_argument("-s", dest="seed", type=int, default=None, help="Seed (défaut: horloge)")
    p.add_argument("-i", dest="total", type=int, default=cfg.nb_tests, help="Nombre total de tests")
    p.add_argument("-t", dest="start", type=int, default=0, help="Reprendre au test N")
    p.add_argument("-v", dest="display_level", action="store_const",
                   const=VERBOSE_LEVEL, default=DISPLAY_LEVEL, help="Mode verbeux")
    p.add_argument("-p", dest="pause", action="store_true", help="Pause avant de quitter")
    p.add_argument("--log-file", default=None)
    args = p.parse_args(argv)
    for name in ("seed", "total", "start"):
        v = getattr(args, name)
        if v is not None and v < 0:
            p.error(f"-{name[0]} must be >= 0")
    return args


def main(argv=None) -> int:
    cfg = FuzzConfig.from_env()
    args = parse_args(argv, cfg)
    setup_logging(Path(args.log_file) if args.log_file else None,
                  verbose=args.display_level >= VERBOSE_LEVEL)
    reporter = Reporter(args.display_level)
    seed = default_seed() if args.seed is None else args.seed & 0xFFFFFFFF

    reporter.display(1, "U16 rANS (%2i bits) automated test", struct.calcsize("P") * 8)

    report = unit_tests(reporter)
    if not report.passed:
        reporter.display(1, "%s", report.failure)
        return 1

    reporter.display(2, "Fuzzer seed : %d", seed)
    report = fuzz_tests(seed, args.total, args.start, cfg, reporter)
    if not report.passed:
        reporter.display(1, "%s", report.failure)
        return 1

    reporter.display(2, "All %d tests passed", args.total)
    if args.pause:
        input("press enter ...\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
