import logging

from taxi_sim.app.protocols import NetworkSource
from taxi_sim.domain.entities.geography import (
    RoadNode,
    RoadPath,
    path_id,
    split_path_id,
)
from taxi_sim.domain.entities.taxi import Taxi
from taxi_sim.domain.intersections import IntersectionRegistry
from taxi_sim.domain.mechanics.mechanics_geometry import (
    STRAIGHT_DOT,
    TURN_CROSS,
    Turn,
    categorize_paths,
)
from taxi_sim.domain.mechanics.mechanics_topology import flip, next_hop
from taxi_sim.domain.network import IntersectionStrategy, RoadNetwork

log = logging.getLogger(__name__)

_MODE_TURN: dict[str, Turn] = {
    "pass_through": "straight",
    "turn_left": "left",
    "turn_right": "right",
}


class Router:
    """Local, rule-based choice of the next path when a taxi finishes one."""

    def __init__(
        self,
        source: NetworkSource,
        *,
        rng=None,
        straight_dot: float = STRAIGHT_DOT,
        turn_cross: float = TURN_CROSS,
    ):
        self.source = source
        self.rng = rng
        self.straight_dot, self.turn_cross = straight_dot, turn_cross

    def next_path(
        self,
        current_path_id: str,
        intersections: IntersectionRegistry | None = None,
        taxi: Taxi | None = None,
    ) -> RoadPath | None:
        net = self.source.network
        ends = self._endpoints(net, current_path_id)
        if ends is None:
            log.warning("malformed path id", extra={"extra": {"path_id": current_path_id}})
            return None
        src_id, dst_id = ends
        node = net.node(dst_id)
        if node is None:
            log.warning(
                "path leads to unknown node",
                extra={"extra": {"path_id": current_path_id, "node_id": dst_id}},
            )
            return None

        intersections = intersections or IntersectionRegistry()
        if net.strategy_for(dst_id) is IntersectionStrategy.TOPOLOGICAL and taxi is not None:
            return self._topological(net, node, src_id, intersections, taxi)
        return self._vector_geometry(net, node, src_id, current_path_id, intersections, taxi)

    # ------------------------------------------------------------------

    @staticmethod
    def _endpoints(net: RoadNetwork, pid: str) -> tuple[str, str] | None:
        p = net.path(pid)
        if p is not None and p.source is not None and p.dest is not None:
            return p.source, p.dest
        return split_path_id(pid)

    def _topological(
        self,
        net: RoadNetwork,
        node: RoadNode,
        src_id: str,
        intersections: IntersectionRegistry,
        taxi: Taxi,
    ) -> RoadPath | None:
        incoming = node.slot_of(src_id)
        if incoming is None and taxi.previous_node_id is not None:
            incoming = node.slot_of(taxi.previous_node_id)
        if incoming is None:
            log.warning(
                "source not among neighbor slots, using stored direction",
                extra={
                    "extra": {
                        "node_id": node.id,
                        "source": src_id,
                        "taxi_id": taxi.id,
                        "stored": taxi.incoming_dir,
                    }
                },
            )
            incoming = taxi.incoming_dir
            if incoming is None:
                return None

        mode = intersections.mode_of(node.id)
        hop = next_hop(node, incoming, mode)
        if not hop.found:
            return None

        nxt = net.path(path_id(node.id, hop.next_id))
        if nxt is None:
            log.warning(
                "resolved hop has no path",
                extra={"extra": {"node_id": node.id, "next_id": hop.next_id}},
            )
            return None
        taxi.enter_intersection(hop.next_id, flip(hop.outgoing_dir))
        return nxt

    def _vector_geometry(
        self,
        net: RoadNetwork,
        node: RoadNode,
        src_id: str,
        current_path_id: str,
        intersections: IntersectionRegistry,
        taxi: Taxi | None,
    ) -> RoadPath | None:
        candidates = net.next_paths_from(node.id)
        if not candidates:
            log.warning("dead end without exits", extra={"extra": {"node_id": node.id}})
            return None
        if len(candidates) == 1:
            return candidates[0]

        if node.id in intersections:
            incoming = net.path(current_path_id)
            if incoming is None:
                src = net.node(src_id)
                if src is None:
                    return self._pick_random(candidates)
                incoming = RoadPath.straight(src, node)
            by_turn = categorize_paths(
                incoming,
                candidates,
                straight_dot=self.straight_dot,
                turn_cross=self.turn_cross,
            )
            wanted = _MODE_TURN[intersections.mode_of(node.id)]
            chosen = by_turn[wanted] or by_turn["straight"]
            if chosen is not None:
                if taxi is not None:
                    taxi.current_intersection_id = chosen.dest
                return chosen

        return self._pick_random(candidates)

    def _pick_random(self, candidates: list[RoadPath]) -> RoadPath:
        if self.rng is None:
            return candidates[0]
        return candidates[int(self.rng.integers(0, len(candidates)))]
