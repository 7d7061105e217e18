# taxi_sim/app/controllers/fleet.py
import logging

from taxi_sim.app.events import NetworkRebuilt, TaxiPurchased
from taxi_sim.domain.entities.geography import RoadPath
from taxi_sim.domain.entities.taxi import Taxi
from taxi_sim.domain.state import SimContext

log = logging.getLogger(__name__)


class FleetHandler:
    def __init__(
        self,
        ctx: SimContext,
        *,
        spawn_node_id: str = "StarterNode",
        start_money: int = 100,
        speed: float = 1.5,
        max_taxis: int = 3,
        taxi_cost: int = 300,
        cost_step: int = 100,
    ):
        self.ctx = ctx
        self.spawn_node_id = spawn_node_id
        self.start_money = start_money
        self.speed = speed
        self.max_taxis = max_taxis
        self.taxi_cost, self.cost_step = taxi_cost, cost_step
        self.purchases = 0

    @property
    def next_cost(self) -> int:
        return self.taxi_cost + self.cost_step * self.purchases

    def spawn_paths(self) -> list[RoadPath]:
        """Paths leaving the spawn node first, then every other path in network order."""
        net = self.ctx.network
        first = net.next_paths_from(self.spawn_node_id)
        if not first and net.paths:
            log.warning(
                "spawn node has no outgoing paths, using first path",
                extra={"extra": {"spawn_node_id": self.spawn_node_id}},
            )
        seen = {p.id for p in first}
        return first + [p for p in net.paths.values() if p.id not in seen]

    def _place(self, taxi: Taxi, slot: int, paths: list[RoadPath]) -> None:
        if not paths:
            taxi.path, taxi.t = None, 0.0
            return
        taxi.place(paths[slot % len(paths)])

    def on_network_rebuilt(self, ev: NetworkRebuilt):
        # old paths are gone after a rebuild, so every taxi is put back on the road
        paths = self.spawn_paths()
        if not self.ctx.taxis:
            taxi = Taxi(id="taxi-1", speed=self.speed, money=self.start_money)
            self.ctx.add_taxi(taxi)
            log.info("initial taxi spawned", extra={"extra": {"taxi_id": taxi.id}})
        for i, taxi in enumerate(self.ctx.taxi_list()):
            self._place(taxi, i, paths)
        return []

    def buy_taxi(self, now_ms: float) -> TaxiPurchased | None:
        if len(self.ctx.taxis) >= self.max_taxis:
            log.warning("fleet is full", extra={"extra": {"max_taxis": self.max_taxis}})
            return None
        cost = self.next_cost
        if self.ctx.total_money < cost:
            log.warning(
                "not enough money for a taxi",
                extra={"extra": {"cost": cost, "money": self.ctx.total_money}},
            )
            return None
        taxi = Taxi(id=f"taxi-{len(self.ctx.taxis) + 1}", speed=self.speed, money=-cost)
        self._place(taxi, len(self.ctx.taxis), self.spawn_paths())
        self.ctx.add_taxi(taxi)
        self.purchases += 1
        log.info("taxi purchased", extra={"extra": {"taxi_id": taxi.id, "cost": cost}})
        return TaxiPurchased(t=now_ms, taxi_id=taxi.id, cost=cost)
