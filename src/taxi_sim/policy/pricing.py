# taxi_sim/policy/pricing.py
import math
from collections.abc import Sequence

from taxi_sim.app.protocols import PricingPolicy

BASE_PAYOUT = 100
PAYOUT_PER_DISTANCE = 10


class DistancePricingPolicy(PricingPolicy):
    """floor((base + distance * rate) * mean(zone multipliers) * tier scale)."""

    def __init__(
        self,
        base: float = BASE_PAYOUT,
        rate: float = PAYOUT_PER_DISTANCE,
        tier_scale: Sequence[float] = (1.0, 1.0, 1.0, 1.0),
    ):
        if len(tier_scale) != 4:
            raise ValueError("tier_scale needs one factor per tier (4)")
        self.base, self.rate, self.tier_scale = base, rate, tuple(tier_scale)

    def payout(
        self,
        distance: float,
        pickup_multiplier: float = 1.0,
        dropoff_multiplier: float = 1.0,
        tier: int = 1,
    ) -> int:
        zone = (pickup_multiplier + dropoff_multiplier) / 2
        raw = (self.base + distance * self.rate) * zone
        scale = self.tier_scale[min(4, max(1, tier)) - 1]
        return math.floor(raw if scale == 1.0 else raw * scale)
