# taxi_sim/app/wiring.py
from taxi_sim.app.controllers.deliveries import DeliveryHandler
from taxi_sim.app.controllers.fleet import FleetHandler
from taxi_sim.app.controllers.shift import ShiftHandler
from taxi_sim.app.controllers.traffic import TrafficHandler
from taxi_sim.app.events import NetworkRebuilt
from taxi_sim.sim.kernel import Kernel


def wire(
    kernel: Kernel,
    *,
    traffic: TrafficHandler,
    deliveries: DeliveryHandler,
    shift: ShiftHandler,
    fleet: FleetHandler,
) -> None:
    k = kernel

    # per-tick systems, in this order
    k.add_system("movement", traffic.move)
    k.add_system("collisions", traffic.collide)
    k.add_system("deliveries", deliveries.tick)
    k.add_system("shift", shift.tick)

    # network lifecycle: taxis back on the road, stale deliveries dropped
    k.on(NetworkRebuilt, fleet.on_network_rebuilt)
    k.on(NetworkRebuilt, deliveries.on_network_rebuilt)
