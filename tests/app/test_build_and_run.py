# tests/app/test_build_and_run.py
import pytest

from taxi_sim.app.build import build
from taxi_sim.app.events import DeliveryCompleted, DeliverySpawned, NetworkRebuilt, TaxisCollided
from taxi_sim.io.nodes import nodes_from_records
from taxi_sim.io.recorder import MemorySink

NODES = [
    {"id": "StarterNode", "position": [0, 0, 0], "east": "IntersectionMain"},
    {
        "id": "IntersectionMain",
        "position": [6, 0, 0],
        "neighbors": ["PickupNorth", "DropoffEast", "PickupSouth", "StarterNode"],
    },
    {"id": "PickupNorth", "position": [6, 0, -6], "south": "IntersectionMain"},
    {
        "id": "DropoffEast",
        "position": [12, 0, 0],
        "west": "IntersectionMain",
        "metadata": {"payout_multiplier": 1.5},
    },
    {"id": "PickupSouth", "position": [6, 0, 6], "north": "IntersectionMain"},
]


def make_cfg(**over):
    cfg = {
        "name": "test",
        "run_id": "t-1",
        "sim": {"seed": 1, "duration_s": 60, "tick_ms": 50},
        "network": {"nodes": NODES},
    }
    cfg.update(over)
    return cfg


def test_build_runs():
    app = build(make_cfg(), use_logging=False)
    assert len(app.ctx.network.paths) == 8
    assert "IntersectionMain" in app.ctx.intersections
    (taxi,) = app.ctx.taxi_list()
    assert taxi.path.id == "StarterNode_to_IntersectionMain"

    spawned = []
    app.kernel.on(DeliverySpawned, spawned.append)
    app.run(30_000)
    assert app.kernel.now == pytest.approx(30_000)
    assert app.kernel.ticks == 600
    assert spawned and spawned[0].t == 50.0
    assert taxi.path is not None


def test_full_shift_records_business_events():
    sink = MemorySink()
    app = build(make_cfg(), sinks=[sink])
    app.run()
    assert app.clock.over
    names = sink.names()
    assert names[0] == "delivery_requested"
    assert names[-1] == "shift_summary"
    assert sink.events[-1].total_money == app.ctx.total_money


RING = [
    {"id": "StarterNode", "position": [0, 0, 0], "next": "PickupA"},
    {"id": "PickupA", "position": [10, 0, 0], "next": ["DropoffB"]},
    {"id": "DropoffB", "position": [10, 0, 10], "next": "[\"PickupC\"]"},
    {"id": "PickupC", "position": [0, 0, 10], "next": "StarterNode"},
]


def test_deliveries_get_completed_over_a_shift():
    # a one-way ring passes every delivery node once per lap
    cfg = make_cfg(sim={"seed": 3, "duration_s": 180, "tick_ms": 50}, network={"nodes": RING})
    app = build(cfg, use_logging=False)
    done = []
    app.kernel.on(DeliveryCompleted, lambda ev: done.append(ev))
    app.run()
    assert done
    assert app.ctx.total_money == 100 + sum(ev.payout for ev in done)


def test_same_seed_same_shift():
    a = build(make_cfg(), use_logging=False)
    b = build(make_cfg(), use_logging=False)
    a.run()
    b.run()
    assert a.summary() == b.summary()


def test_rebuild_goes_through_the_kernel():
    app = build(make_cfg(network={"nodes": []}), use_logging=False)
    assert app.ctx.taxis == {}
    seen = []
    app.kernel.on(NetworkRebuilt, lambda ev: seen.append((ev.nodes, ev.paths)))

    app.load_network(nodes_from_records(NODES))
    assert seen == [(5, 8)]
    assert len(app.ctx.taxis) == 1


def test_paused_app_does_not_advance():
    app = build(make_cfg(), use_logging=False)
    app.step()
    assert app.toggle_pause().paused
    t = app.kernel.now
    assert app.step() == 0
    assert app.kernel.now == t
    app.toggle_pause()
    app.step()
    assert app.kernel.now == t + 50


def test_paused_app_does_not_run():
    app = build(make_cfg(), use_logging=False)
    app.step()
    taxi = app.ctx.taxis["taxi-1"]
    path_id, t = taxi.path.id, taxi.t
    app.toggle_pause()
    now, elapsed = app.kernel.now, app.clock.elapsed_ms

    assert app.run(5000.0) == 0
    assert app.kernel.now == now
    assert app.clock.elapsed_ms == elapsed
    assert (taxi.path.id, taxi.t) == (path_id, t)


def test_player_actions():
    app = build(make_cfg(), use_logging=False)
    assert app.cycle_intersection("IntersectionMain").mode == "turn_left"
    assert app.set_intersection_mode("IntersectionMain", "turn_right").mode == "turn_right"
    assert app.buy_taxi() is None  # starts with 100, first taxi costs 300
    app.ctx.taxis["taxi-1"].money = 1000
    assert app.buy_taxi().taxi_id == "taxi-2"
    assert app.summary()["taxis"] == {"taxi-1": 1000, "taxi-2": -300}


def test_two_taxis_on_one_road_collide():
    app = build(make_cfg(fleet={"max_taxis": 2, "taxi_cost": 0}), use_logging=False)
    hits = []
    app.kernel.on(TaxisCollided, lambda ev: hits.append(ev))
    assert app.buy_taxi() is not None
    # taxi-2 is placed on the next path; put it head to head with taxi-1
    t1, t2 = app.ctx.taxis["taxi-1"], app.ctx.taxis["taxi-2"]
    t2.place(t1.path, 0.02)
    app.step()
    assert [(ev.taxi_a, ev.taxi_b) for ev in hits] == [("taxi-1", "taxi-2")]
    assert t1.is_reversing and t2.is_reversing
