import logging
from collections.abc import Sequence
from itertools import combinations

from taxi_sim.domain.entities.taxi import Taxi

log = logging.getLogger(__name__)

COLLISION_THRESHOLD = 0.5
COLLISION_COOLDOWN_MS = 2000.0


class CollisionDetector:
    def __init__(
        self, threshold: float = COLLISION_THRESHOLD, cooldown_ms: float = COLLISION_COOLDOWN_MS
    ):
        self.threshold, self.cooldown_ms = threshold, cooldown_ms

    def check(self, taxis: Sequence[Taxi], dt_ms: float) -> list[tuple[str, str]]:
        """One O(n^2) pass. Returns the pairs that were sent into reverse."""
        for taxi in taxis:
            taxi.tick_cooldown(dt_ms)

        hits: list[tuple[str, str]] = []
        for a, b in combinations(taxis, 2):
            if a.on_cooldown or b.on_cooldown or a.is_reversing or b.is_reversing:
                continue
            pa, pb = a.position, b.position
            if pa is None or pb is None:
                continue
            d = pa.dist(pb)
            if d < self.threshold:
                a.start_reversing(self.cooldown_ms)
                b.start_reversing(self.cooldown_ms)
                hits.append((a.id, b.id))
                log.info(
                    "collision", extra={"extra": {"a": a.id, "b": b.id, "distance": round(d, 3)}}
                )
        return hits
