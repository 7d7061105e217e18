# taxi_sim/app/build.py
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from taxi_sim.app.controllers.deliveries import DeliveryHandler
from taxi_sim.app.controllers.fleet import FleetHandler
from taxi_sim.app.controllers.intersections import IntersectionController
from taxi_sim.app.controllers.shift import ShiftHandler
from taxi_sim.app.controllers.traffic import TrafficHandler
from taxi_sim.app.events import NetworkRebuilt
from taxi_sim.app.wiring import wire
from taxi_sim.config.models import ScenarioModel
from taxi_sim.domain.entities.geography import RoadNode
from taxi_sim.domain.mechanics.mechanics_collisions import CollisionDetector
from taxi_sim.domain.mechanics.mechanics_path_traversers import Mover
from taxi_sim.domain.mechanics.mechanics_routers import Router
from taxi_sim.domain.mechanics.mechanics_topology import Mode
from taxi_sim.domain.network import RoadNetwork
from taxi_sim.domain.state import SimContext
from taxi_sim.io.config import scenario_nodes
from taxi_sim.io.kernel_logging import KernelLogging  # JSON logs
from taxi_sim.io.recorder import JsonlSink, Recorder, Sink
from taxi_sim.runtime.policy_factory import (
    make_color_policy,
    make_pricing_policy,
    make_sizing_policy,
)
from taxi_sim.sim.clock import ShiftClock, seconds
from taxi_sim.sim.event import BaseEvent
from taxi_sim.sim.hooks import NoopHooks
from taxi_sim.sim.kernel import Kernel
from taxi_sim.sim.rng import RNGRegistry


@dataclass
class App:
    kernel: Kernel
    clock: ShiftClock
    rng: RNGRegistry
    ctx: SimContext
    router: Router
    traffic: TrafficHandler
    deliveries: DeliveryHandler
    fleet: FleetHandler
    shift: ShiftHandler
    intersections: IntersectionController
    recorder: Recorder
    tick_ms: float = 16.0

    # ---- driving the loop

    def step(self, dt_ms: float | None = None) -> int:
        """One frame. A paused shift does not advance at all."""
        if self.shift.paused:
            return 0
        return self.kernel.step(self.tick_ms if dt_ms is None else dt_ms)

    def run(self, until_ms: float | None = None) -> int:
        if self.shift.paused:
            return 0
        until = self.clock.duration_ms if until_ms is None else until_ms
        return self.kernel.run(until, tick_ms=self.tick_ms)

    # ---- player actions; each one lands on the kernel as an event

    def _publish(self, ev: BaseEvent | None) -> BaseEvent | None:
        if ev is not None:
            self.kernel.publish(ev)
        return ev

    def load_network(self, nodes: Iterable[RoadNode]) -> RoadNetwork:
        return self.ctx.rebuild(nodes)

    def cycle_intersection(self, node_id: str):
        return self._publish(self.intersections.cycle(node_id, self.kernel.now))

    def set_intersection_mode(self, node_id: str, mode: Mode):
        return self._publish(self.intersections.set_mode(node_id, mode, self.kernel.now))

    def buy_taxi(self):
        return self._publish(self.fleet.buy_taxi(self.kernel.now))

    def toggle_pause(self):
        return self._publish(self.shift.toggle_pause(self.kernel.now))

    def summary(self) -> dict:
        return {
            "t_ms": self.kernel.now,
            "ticks": self.kernel.ticks,
            "remaining_ms": self.clock.remaining_ms,
            "total_money": self.ctx.total_money,
            "taxis": {t.id: t.money for t in self.ctx.taxi_list()},
            "active_deliveries": len(self.ctx.active_deliveries()),
            "intersections": self.ctx.intersections.modes(),
        }


def build(
    cfg: ScenarioModel | Mapping,
    *,
    use_logging: bool = True,
    sinks: Sequence[Sink] | None = None,
    nodes: Iterable[RoadNode] | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) Clock & RNG
    clock = ShiftClock(
        duration_ms=seconds(model.sim.duration_s), rush_hour_ms=seconds(model.sim.rush_hour_s)
    )
    rng_registry = RNGRegistry(model.sim.seed, scenario=model.name)

    # 2) Kernel (with hooks)

    # Recorder for analytics
    recorder = Recorder(*(sinks if sinks is not None else [JsonlSink()]))

    hooks = (
        KernelLogging(
            run_id=model.run_id,
            recorder=recorder,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )
    kernel = Kernel(hooks=hooks)

    # 3) State & policies
    ctx = SimContext()
    pricing_policy = make_pricing_policy(model.pricing)
    sizing_policy = make_sizing_policy(model.sizing, rng_registry=rng_registry)
    color_policy = make_color_policy(model.delivery, rng_registry=rng_registry)

    router = Router(
        ctx,
        rng=rng_registry.stream("routing"),
        straight_dot=model.routing.straight_dot,
        turn_cross=model.routing.turn_cross,
    )

    # 4) Handlers (inject deps explicitly)
    traffic = TrafficHandler(
        ctx,
        mover=Mover(router, ctx.intersections),
        collisions=CollisionDetector(
            threshold=model.collision.threshold, cooldown_ms=model.collision.cooldown_ms
        ),
    )
    shift = ShiftHandler(ctx, clock, pause_cost=model.sim.pause_cost)
    deliveries = DeliveryHandler(
        ctx,
        pricing=pricing_policy,
        sizing=sizing_policy,
        colors=color_policy,
        rng=rng_registry.stream("deliveries"),
        spawn_interval_ms=seconds(model.delivery.spawn_interval_s),
        rush_spawn_interval_ms=seconds(model.delivery.rush_spawn_interval_s),
        pickup_radius=model.delivery.pickup_radius,
        dropoff_radius=model.delivery.dropoff_radius,
        initial_spawn=model.delivery.initial_spawn,
        shift=clock,
    )
    fleet = FleetHandler(
        ctx,
        spawn_node_id=model.fleet.spawn_node_id,
        start_money=model.fleet.start_money,
        speed=model.fleet.speed,
        max_taxis=model.fleet.max_taxis,
        taxi_cost=model.fleet.taxi_cost,
        cost_step=model.fleet.cost_step,
    )

    # 5) Wiring
    wire(kernel, traffic=traffic, deliveries=deliveries, shift=shift, fleet=fleet)
    ctx.subscribe(
        lambda net: kernel.publish(
            NetworkRebuilt(t=kernel.now, nodes=len(net.nodes), paths=len(net.paths))
        )
    )

    app = App(
        kernel=kernel,
        clock=clock,
        rng=rng_registry,
        ctx=ctx,
        router=router,
        traffic=traffic,
        deliveries=deliveries,
        fleet=fleet,
        shift=shift,
        intersections=IntersectionController(ctx),
        recorder=recorder,
        tick_ms=model.sim.tick_ms,
    )

    # 6) Initial network: explicit nodes win over the scenario's own
    initial = list(nodes) if nodes is not None else scenario_nodes(model)
    if initial:
        app.load_network(initial)
    return app
