# domain/intersections.py
import logging
from dataclasses import dataclass, field

from taxi_sim.domain.mechanics.mechanics_topology import MODES, Mode
from taxi_sim.domain.network import RoadNetwork

log = logging.getLogger(__name__)

_CYCLE: dict[Mode, Mode] = {
    "pass_through": "turn_left",
    "turn_left": "turn_right",
    "turn_right": "pass_through",
}


@dataclass
class IntersectionState:
    node_id: str
    mode: Mode = "pass_through"
    available_paths: tuple[str, ...] = ()


@dataclass
class IntersectionRegistry:
    """Player-controlled routing modes, keyed by node id."""

    states: dict[str, IntersectionState] = field(default_factory=dict)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.states

    def __len__(self) -> int:
        return len(self.states)

    def get(self, node_id: str) -> IntersectionState | None:
        return self.states.get(node_id)

    def mode_of(self, node_id: str) -> Mode:
        s = self.states.get(node_id)
        return s.mode if s else "pass_through"

    def reset(self, network: RoadNetwork) -> None:
        """Recreate every state from scratch; modes return to pass_through."""
        states: dict[str, IntersectionState] = {}
        for node in network.nodes.values():
            available = tuple(p.id for p in network.next_paths_from(node.id))
            if node.neighbors is not None:
                eligible = node.intersection_eligible
            else:
                eligible = node.has_type("intersection") and len(available) > 1
            if eligible:
                states[node.id] = IntersectionState(node.id, "pass_through", available)
        self.states = states
        log.info("intersections initialised", extra={"extra": {"count": len(states)}})

    def cycle(self, node_id: str) -> Mode | None:
        s = self.states.get(node_id)
        if s is None:
            log.warning("no intersection state", extra={"extra": {"node_id": node_id}})
            return None
        s.mode = _CYCLE[s.mode]
        return s.mode

    def set_mode(self, node_id: str, mode: Mode) -> Mode | None:
        if mode not in MODES:
            raise ValueError(f"unknown intersection mode {mode!r}")
        s = self.states.get(node_id)
        if s is None:
            log.warning("no intersection state", extra={"extra": {"node_id": node_id}})
            return None
        s.mode = mode
        return mode

    def modes(self) -> dict[str, Mode]:
        return {nid: s.mode for nid, s in self.states.items()}
