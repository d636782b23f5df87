from __future__ import annotations

import numpy as np

__all__ = ["SENTINEL", "GuardedBuffer"]

# Valeur témoin placée juste après la frontière déclarée
SENTINEL = 1024 + 250


class GuardedBuffer:
    """
    Scratch `uint16` réutilisable, avec une case sentinelle possédée.

    `arm(size)` rend une vue de exactement `size` cases et écrit `SENTINEL`
    dans la case suivante ; `intact()` vérifie qu'elle n'a pas bougé.
    La vue est bornée par numpy : le codec ne voit jamais la sentinelle.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._cells = np.zeros(int(capacity) + 1, dtype=np.uint16)
        self._boundary: int | None = None

    @property
    def capacity(self) -> int:
        return len(self._cells) - 1

    def arm(self, size: int) -> np.ndarray:
        size = int(size)
        if not (0 <= size <= self.capacity):
            raise ValueError(f"requested size {size} outside [0, {self.capacity}]")
        self._cells[size] = SENTINEL
        self._boundary = size
        return self._cells[:size]

    def intact(self) -> bool:
        if self._boundary is None:
            raise RuntimeError("GuardedBuffer.intact() called before arm()")
        return int(self._cells[self._boundary]) == SENTINEL

    def head(self, n: int) -> np.ndarray:
        """Les `n` premières cases (lecture du résultat décodé)."""
        return self._cells[: int(n)]
