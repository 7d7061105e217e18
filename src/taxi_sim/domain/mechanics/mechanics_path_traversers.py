import logging

from taxi_sim.domain.entities.geography import path_id
from taxi_sim.domain.entities.taxi import HALTED, Taxi
from taxi_sim.domain.intersections import IntersectionRegistry
from taxi_sim.domain.mechanics.mechanics_routers import Router

log = logging.getLogger(__name__)


class Mover:
    """Advances taxis along their paths and hands them to the router at path ends."""

    def __init__(self, router: Router, intersections: IntersectionRegistry):
        self.router = router
        self.intersections = intersections

    def advance(self, taxi: Taxi, dt_s: float) -> bool:
        """Move ``taxi`` by ``dt_s`` seconds. Returns True when it switched paths."""
        if taxi.state in HALTED or taxi.path is None:
            return False
        path = taxi.path
        step = 1.0 if path.length <= 0 else (dt_s * taxi.speed) / path.length

        if taxi.is_reversing:
            taxi.t -= step
            if taxi.t > 0.0:
                return False
            taxi.t = 0.0
            taxi.is_reversing = False
            return self._reverse_out(taxi)

        taxi.t += step
        if taxi.t < 1.0:
            return False
        taxi.t = 1.0
        taxi.previous_node_id = path.source
        nxt = self.router.next_path(path.id, self.intersections, taxi)
        if nxt is None:
            log.warning(
                "no next path, holding", extra={"extra": {"taxi_id": taxi.id, "path_id": path.id}}
            )
            return False
        taxi.path, taxi.t = nxt, 0.0
        return True

    def _reverse_out(self, taxi: Taxi) -> bool:
        path = taxi.path
        if path.source is None or path.dest is None:
            log.warning("cannot reverse off unnamed path", extra={"extra": {"path_id": path.id}})
            return False
        # arriving at the source from the destination side
        taxi.previous_node_id = path.dest
        back = path_id(taxi.previous_node_id, path.source)
        nxt = self.router.next_path(back, self.intersections, taxi)
        if nxt is None:
            log.warning(
                "no path after reversing", extra={"extra": {"taxi_id": taxi.id, "path_id": path.id}}
            )
            return False
        taxi.path, taxi.t = nxt, 0.0
        return True

    def advance_all(self, taxis, dt_s: float) -> int:
        return sum(1 for taxi in taxis if self.advance(taxi, dt_s))
