# taxi_sim/policy/sizing.py
import bisect
from collections.abc import Sequence

import numpy as np

from taxi_sim.app.protocols import SizingPolicy

# distance bucket upper bounds; one weight row per bucket (+1 for "beyond")
BUCKET_BOUNDS: tuple[float, ...] = (10.0, 20.0, 30.0)
TIER_WEIGHTS: tuple[tuple[float, float, float, float], ...] = (
    (0.60, 0.25, 0.10, 0.05),
    (0.30, 0.35, 0.25, 0.10),
    (0.15, 0.25, 0.35, 0.25),
    (0.05, 0.15, 0.30, 0.50),
)


class DistanceBucketSizingPolicy(SizingPolicy):
    def __init__(
        self,
        rng,
        bounds: Sequence[float] = BUCKET_BOUNDS,
        weights: Sequence[Sequence[float]] = TIER_WEIGHTS,
    ):
        if len(weights) != len(bounds) + 1:
            raise ValueError(f"need {len(bounds) + 1} weight rows, got {len(weights)}")
        self.rng = rng
        self.bounds = list(bounds)
        w = np.asarray(weights, dtype=float)
        if w.shape[1] != 4 or (w < 0).any() or (w.sum(axis=1) <= 0).any():
            raise ValueError("each weight row needs 4 non-negative weights with a positive sum")
        self._p = w / w.sum(axis=1, keepdims=True)

    def bucket(self, distance: float) -> int:
        return bisect.bisect_right(self.bounds, distance)

    def tier(self, distance: float) -> int:
        p = self._p[self.bucket(distance)]
        return int(self.rng.choice(4, p=p)) + 1
