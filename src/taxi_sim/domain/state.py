# taxi_sim/domain/state.py
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from taxi_sim.domain.entities.delivery import DeliveryEvent
from taxi_sim.domain.entities.geography import RoadNode, RoadPath
from taxi_sim.domain.entities.taxi import Taxi
from taxi_sim.domain.intersections import IntersectionRegistry
from taxi_sim.domain.network import EMPTY_NETWORK, RoadNetwork, build_network

log = logging.getLogger(__name__)

RebuildListener = Callable[[RoadNetwork], None]


@dataclass
class SimContext:
    """Owns the active road network and the mutable simulation state."""

    network: RoadNetwork = EMPTY_NETWORK
    intersections: IntersectionRegistry = field(default_factory=IntersectionRegistry)
    taxis: dict[str, Taxi] = field(default_factory=dict)
    deliveries: list[DeliveryEvent] = field(default_factory=list)
    _listeners: list[RebuildListener] = field(default_factory=list, repr=False)

    # ---- network

    def get_active(self) -> RoadNetwork:
        return self.network

    def rebuild(self, nodes: Iterable[RoadNode]) -> RoadNetwork:
        # the old snapshot stays installed until the new one is complete
        net = build_network(nodes)
        self.network = net
        self.intersections.reset(net)
        log.info(
            "network rebuilt",
            extra={"extra": {"nodes": len(net.nodes), "paths": len(net.paths)}},
        )
        for cb in list(self._listeners):
            cb(net)
        return net

    def subscribe(self, cb: RebuildListener) -> Callable[[], None]:
        """Register a rebuild listener; returns a callable that unsubscribes it."""
        self._listeners.append(cb)

        def _unsubscribe():
            if cb in self._listeners:
                self._listeners.remove(cb)

        return _unsubscribe

    def next_paths_from(self, node_id: str) -> list[RoadPath]:
        return self.network.next_paths_from(node_id)

    # ---- taxis

    def add_taxi(self, taxi: Taxi) -> None:
        self.taxis[taxi.id] = taxi

    def taxi_list(self) -> list[Taxi]:
        return list(self.taxis.values())

    @property
    def total_money(self) -> int:
        return sum(t.money for t in self.taxis.values())

    # ---- deliveries

    def active_deliveries(self) -> list[DeliveryEvent]:
        return [d for d in self.deliveries if d.active]

    def delivery(self, delivery_id: str) -> DeliveryEvent | None:
        return next((d for d in self.deliveries if d.id == delivery_id), None)

    def reserved_node_ids(self) -> set[str]:
        out: set[str] = set()
        for d in self.deliveries:
            if d.active:
                out.update(d.node_ids())
        return out
