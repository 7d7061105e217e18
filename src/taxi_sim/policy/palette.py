# taxi_sim/policy/palette.py
from collections.abc import Sequence

from taxi_sim.app.protocols import ColorPolicy

DELIVERY_COLORS: tuple[str, ...] = (
    "#00ff00",
    "#0088ff",
    "#ff00ff",
    "#ffff00",
    "#ff8800",
    "#00ffff",
    "#ff0088",
    "#88ff00",
    "#ff0000",
    "#8800ff",
    "#00ff88",
    "#ff8888",
    "#88ff88",
    "#8888ff",
    "#ffff88",
    "#ff88ff",
)


class PaletteColorPolicy(ColorPolicy):
    def __init__(self, rng, colors: Sequence[str] = DELIVERY_COLORS):
        if not colors:
            raise ValueError("palette must not be empty")
        self.rng, self.colors = rng, tuple(colors)

    def pick(self, in_use: set[str]) -> str:
        free = [c for c in self.colors if c not in in_use]
        pool = free or list(self.colors)  # exhausted: reuse any
        return pool[int(self.rng.integers(0, len(pool)))]
