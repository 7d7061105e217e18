# taxi_sim/app/controllers/deliveries.py
import logging

from taxi_sim.app.events import (
    DeliveryCompleted,
    DeliveryPickedUp,
    DeliverySpawned,
    DeliverySpawnSkipped,
    NetworkRebuilt,
)
from taxi_sim.app.protocols import ColorPolicy, PricingPolicy, SizingPolicy
from taxi_sim.domain.entities.delivery import DeliveryEvent
from taxi_sim.domain.entities.geography import RoadNode
from taxi_sim.domain.state import SimContext
from taxi_sim.sim.clock import ShiftClock
from taxi_sim.sim.event import BaseEvent

log = logging.getLogger(__name__)

DELIVERY_NODE_TYPES = ("pickup", "dropoff")


class DeliveryHandler:
    """Spawns delivery events on a countdown and resolves pickups/dropoffs each tick."""

    def __init__(
        self,
        ctx: SimContext,
        pricing: PricingPolicy,
        sizing: SizingPolicy,
        colors: ColorPolicy,
        rng,
        *,
        spawn_interval_ms: float = 10_000.0,
        rush_spawn_interval_ms: float = 5_000.0,
        pickup_radius: float = 2.0,
        dropoff_radius: float = 2.0,
        initial_spawn: bool = True,
        shift: ShiftClock | None = None,
    ):
        self.ctx = ctx
        self.pricing, self.sizing, self.colors = pricing, sizing, colors
        self.rng = rng
        self.spawn_interval_ms = spawn_interval_ms
        self.rush_spawn_interval_ms = rush_spawn_interval_ms
        self.pickup_radius, self.dropoff_radius = pickup_radius, dropoff_radius
        self.shift = shift
        self.timer_ms = 0.0 if initial_spawn else spawn_interval_ms
        self._seq = 0

    @property
    def interval_ms(self) -> float:
        if self.shift is not None and self.shift.rush_hour:
            return self.rush_spawn_interval_ms
        return self.spawn_interval_ms

    # ------------ per-tick system --------------

    def tick(self, now_ms: float, dt_ms: float) -> list[BaseEvent]:
        out: list[BaseEvent] = []
        self.timer_ms -= dt_ms
        if self.timer_ms <= 0:
            out.append(self.try_spawn(now_ms))
            self.timer_ms = self.interval_ms
        out.extend(self.check_pickups(now_ms))
        out.extend(self.check_dropoffs(now_ms))
        return out

    # ------------ spawning --------------

    def candidate_nodes(self) -> list[RoadNode]:
        return self.ctx.network.nodes_with_type(*DELIVERY_NODE_TYPES)

    def free_nodes(self) -> list[RoadNode]:
        reserved = self.ctx.reserved_node_ids()
        return [n for n in self.candidate_nodes() if n.id not in reserved]

    def try_spawn(self, now_ms: float) -> BaseEvent:
        free = self.free_nodes()
        if len(free) < 2:
            log.warning(
                "not enough free delivery nodes, skipping spawn",
                extra={"extra": {"free": len(free), "t": now_ms}},
            )
            return DeliverySpawnSkipped(t=now_ms, free_nodes=len(free))

        i, j = (int(k) for k in self.rng.choice(len(free), size=2, replace=False))
        pickup, dropoff = free[i], free[j]
        distance = pickup.position.dist(dropoff.position)
        tier = self.sizing.tier(distance)
        payout = self.pricing.payout(
            distance,
            pickup.metadata.payout_multiplier,
            dropoff.metadata.payout_multiplier,
            tier=tier,
        )
        color = self.colors.pick({d.color for d in self.ctx.active_deliveries()})

        self._seq += 1
        ev = DeliveryEvent(
            id=f"delivery-{self._seq}",
            pickup_node_id=pickup.id,
            dropoff_node_id=dropoff.id,
            payout=payout,
            multiplier=tier,
            color=color,
            spawn_ms=now_ms,
        )
        self.ctx.deliveries.append(ev)
        log.info(
            "delivery spawned",
            extra={
                "extra": {
                    "delivery_id": ev.id,
                    "pickup": pickup.id,
                    "dropoff": dropoff.id,
                    "payout": payout,
                    "tier": tier,
                    "distance": round(distance, 3),
                }
            },
        )
        return DeliverySpawned(
            t=now_ms,
            delivery_id=ev.id,
            pickup_node_id=ev.pickup_node_id,
            dropoff_node_id=ev.dropoff_node_id,
            payout=payout,
            multiplier=tier,
            color=color,
        )

    # ------------ proximity checks --------------

    def check_pickups(self, now_ms: float) -> list[BaseEvent]:
        out: list[BaseEvent] = []
        net = self.ctx.network
        for taxi in self.ctx.taxi_list():
            if taxi.has_package:
                continue  # one package at a time
            pos = taxi.position
            if pos is None:
                continue
            for d in self.ctx.deliveries:
                if d.status != "waiting_pickup":
                    continue
                node = net.node(d.pickup_node_id)
                if node is None or pos.dist(node.position) >= self.pickup_radius:
                    continue
                taxi.claim(d, now_ms)
                log.info(
                    "delivery picked up", extra={"extra": {"delivery_id": d.id, "taxi_id": taxi.id}}
                )
                out.append(DeliveryPickedUp(t=now_ms, delivery_id=d.id, taxi_id=taxi.id))
                break
        return out

    def check_dropoffs(self, now_ms: float) -> list[BaseEvent]:
        out: list[BaseEvent] = []
        net = self.ctx.network
        for taxi in self.ctx.taxi_list():
            if not taxi.has_package or taxi.current_delivery_id is None:
                continue
            d = self.ctx.delivery(taxi.current_delivery_id)
            pos = taxi.position
            if d is None or d.status != "in_transit" or pos is None:
                continue
            node = net.node(d.dropoff_node_id)
            if node is None or pos.dist(node.position) >= self.dropoff_radius:
                continue
            payout = taxi.complete(d, now_ms)
            self.ctx.deliveries.remove(d)
            log.info(
                "delivery completed",
                extra={
                    "extra": {
                        "delivery_id": d.id,
                        "taxi_id": taxi.id,
                        "payout": payout,
                        "elapsed_ms": now_ms - d.spawn_ms,
                    }
                },
            )
            out.append(DeliveryCompleted(t=now_ms, delivery_id=d.id, taxi_id=taxi.id, payout=payout))
        return out

    # ------------ network lifecycle --------------

    def on_network_rebuilt(self, ev: NetworkRebuilt):
        """Drop deliveries whose nodes vanished; their carriers lose the package."""
        nodes = self.ctx.network.nodes
        stale = [
            d
            for d in self.ctx.deliveries
            if d.pickup_node_id not in nodes or d.dropoff_node_id not in nodes
        ]
        for d in stale:
            self.ctx.deliveries.remove(d)
            carrier = self.ctx.taxis.get(d.claimed_by_taxi_id) if d.claimed_by_taxi_id else None
            if carrier is not None and carrier.current_delivery_id == d.id:
                carrier.has_package = False
                carrier.current_delivery_id = None
                carrier.state = "driving_to_pickup"
            log.warning("delivery dropped after rebuild", extra={"extra": {"delivery_id": d.id}})
        return []
