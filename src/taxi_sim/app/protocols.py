from typing import Protocol, runtime_checkable

from taxi_sim.domain.network import RoadNetwork


@runtime_checkable
class NetworkSource(Protocol):
    """Anything exposing the currently active RoadNetwork (usually SimContext)."""

    network: RoadNetwork


# --------------- Policies -------------------------


@runtime_checkable
class PricingPolicy(Protocol):
    """
    Payout for a delivery, in whole currency units.
    Must be non-decreasing in distance for fixed zone multipliers.
    """

    def payout(
        self,
        distance: float,
        pickup_multiplier: float = 1.0,
        dropoff_multiplier: float = 1.0,
        tier: int = 1,
    ) -> int: ...


@runtime_checkable
class SizingPolicy(Protocol):
    """Draw a package size tier (1..4) for a trip of the given length."""

    def tier(self, distance: float) -> int: ...


@runtime_checkable
class ColorPolicy(Protocol):
    def pick(self, in_use: set[str]) -> str: ...
