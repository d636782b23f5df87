from __future__ import annotations
import logging, sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

__all__ = ["setup_logging", "Reporter", "DISPLAY_LEVEL", "VERBOSE_LEVEL"]

LOGGER_NAME = "u16fuzz"

# 0 : rien / 1 : erreurs / 2 : + résultats, progression / 3 : + avertissements / 4 : + trace
DISPLAY_LEVEL = 2
VERBOSE_LEVEL = 4

_LOG_LEVELS = {1: logging.ERROR, 2: logging.INFO, 3: logging.INFO, 4: logging.DEBUG}


def setup_logging(log_file: Optional[Path], verbose: bool = False) -> None:
    log_fmt = "[%(asctime)s] %(levelname)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=log_fmt, datefmt=datefmt, handlers=handlers)


@dataclass
class Reporter:
    """Display level passed explicitly to every runner (no global verbosity)."""

    display_level: int = DISPLAY_LEVEL
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(LOGGER_NAME))

    def display(self, level: int, msg: str, *args) -> None:
        if level <= 0 or self.display_level < level:
            return
        self.logger.log(_LOG_LEVELS.get(level, logging.DEBUG), msg, *args)

    @property
    def tracing(self) -> bool:
        return self.display_level >= VERBOSE_LEVEL
