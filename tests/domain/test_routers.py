# tests/domain/test_routers.py
import logging

import numpy as np
import pytest

from taxi_sim.domain.entities.taxi import Taxi
from taxi_sim.domain.mechanics.mechanics_routers import Router
from taxi_sim.domain.mechanics.mechanics_topology import NORTH, SOUTH
from taxi_sim.domain.state import SimContext


@pytest.fixture
def legacy_ctx(make_node):
    # approach B heading north (-z); W1 is on the left, E1 on the right
    ctx = SimContext()
    ctx.rebuild(
        [
            make_node("A", 0, 10, next=("B",)),
            make_node("B", 0, 0, next=("N1", "W1", "E1"), types=("intersection",)),
            make_node("N1", 0, -10, next=("B",)),
            make_node("W1", -10, 0, next=("B",)),
            make_node("E1", 10, 0, next=("B",)),
        ]
    )
    return ctx


def test_topological_pass_through_updates_navigation(cross_ctx):
    taxi = Taxi(id="t1")
    router = Router(cross_ctx)
    nxt = router.next_path("S_to_C", cross_ctx.intersections, taxi)
    assert nxt.id == "C_to_N"
    assert taxi.current_intersection_id == "N"
    assert taxi.incoming_dir == SOUTH


def test_topological_follows_the_intersection_mode(cross_ctx):
    router = Router(cross_ctx)
    cross_ctx.intersections.set_mode("C", "turn_right")
    assert router.next_path("S_to_C", cross_ctx.intersections, Taxi(id="t1")).id == "C_to_E"
    cross_ctx.intersections.set_mode("C", "turn_left")
    assert router.next_path("S_to_C", cross_ctx.intersections, Taxi(id="t1")).id == "C_to_W"


def test_topological_dead_end_turns_around(cross_ctx):
    router = Router(cross_ctx)
    taxi = Taxi(id="t1")
    assert router.next_path("C_to_N", cross_ctx.intersections, taxi).id == "N_to_C"
    # left N through its south slot, so C is entered from the north
    assert taxi.incoming_dir == NORTH


def test_unknown_source_falls_back_to_stored_direction(cross_ctx, caplog):
    router = Router(cross_ctx)
    taxi = Taxi(id="t1", incoming_dir=SOUTH)
    with caplog.at_level(logging.WARNING):
        nxt = router.next_path("Elsewhere_to_C", cross_ctx.intersections, taxi)
    assert nxt.id == "C_to_N"
    assert "using stored direction" in caplog.text

    assert router.next_path("Elsewhere_to_C", cross_ctx.intersections, Taxi(id="t2")) is None


def test_malformed_and_dangling_ids_return_none(cross_ctx, caplog):
    router = Router(cross_ctx)
    with caplog.at_level(logging.WARNING):
        assert router.next_path("no-separator", cross_ctx.intersections, Taxi(id="t1")) is None
        assert router.next_path("C_to_Nowhere", cross_ctx.intersections, Taxi(id="t1")) is None
    assert "malformed path id" in caplog.text
    assert "unknown node" in caplog.text


def test_legacy_intersection_picks_turn_by_geometry(legacy_ctx):
    router = Router(legacy_ctx)
    reg = legacy_ctx.intersections
    assert "B" in reg
    assert router.next_path("A_to_B", reg).id == "B_to_N1"
    reg.set_mode("B", "turn_left")
    assert router.next_path("A_to_B", reg).id == "B_to_W1"
    reg.set_mode("B", "turn_right")
    assert router.next_path("A_to_B", reg).id == "B_to_E1"


def test_legacy_intersection_records_the_node_being_driven_to(legacy_ctx):
    taxi = Taxi(id="t1")
    nxt = Router(legacy_ctx).next_path("A_to_B", legacy_ctx.intersections, taxi)
    assert nxt.id == "B_to_N1"
    # the far end of the chosen path, as on topological nodes
    assert taxi.current_intersection_id == "N1"


def test_previous_node_recovers_direction_before_the_stored_one(cross_ctx, caplog):
    router = Router(cross_ctx)
    taxi = Taxi(id="t1", incoming_dir=SOUTH, previous_node_id="W")
    with caplog.at_level(logging.WARNING):
        nxt = router.next_path("Elsewhere_to_C", cross_ctx.intersections, taxi)
    assert nxt.id == "C_to_E"
    assert "using stored direction" not in caplog.text


def test_legacy_missing_turn_falls_back_to_straight(make_node):
    ctx = SimContext()
    ctx.rebuild(
        [
            make_node("A", 0, 10, next=("B",)),
            make_node("B", 0, 0, next=("N1", "E1"), types=("intersection",)),
            make_node("N1", 0, -10),
            make_node("E1", 10, 0),
        ]
    )
    ctx.intersections.set_mode("B", "turn_left")
    assert Router(ctx).next_path("A_to_B", ctx.intersections).id == "B_to_N1"


def test_legacy_single_exit_and_no_exit(triangle_nodes, make_node, caplog):
    ctx = SimContext()
    ctx.rebuild(triangle_nodes + [make_node("Z", 9, 9), make_node("Y", 8, 8, next=("Z",))])
    router = Router(ctx)
    assert router.next_path("A_to_B").id == "B_to_C"
    with caplog.at_level(logging.WARNING):
        assert router.next_path("Y_to_Z") is None


def test_legacy_uncontrolled_choice_is_uniform_random(make_node):
    ctx = SimContext()
    ctx.rebuild(
        [
            make_node("A", 0, 10, next=("B",)),
            make_node("B", 0, 0, next=("N1", "W1", "E1")),  # not tagged: no control
            make_node("N1", 0, -10),
            make_node("W1", -10, 0),
            make_node("E1", 10, 0),
        ]
    )
    assert "B" not in ctx.intersections
    assert Router(ctx).next_path("A_to_B").id == "B_to_N1"  # no rng: first candidate

    router = Router(ctx, rng=np.random.default_rng(3))
    picks = {router.next_path("A_to_B").id for _ in range(60)}
    assert picks == {"B_to_N1", "B_to_W1", "B_to_E1"}
