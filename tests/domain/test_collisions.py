# tests/domain/test_collisions.py
import pytest

from taxi_sim.domain.entities.geography import Point, RoadNode, RoadPath
from taxi_sim.domain.entities.taxi import Taxi
from taxi_sim.domain.mechanics.mechanics_collisions import CollisionDetector


@pytest.fixture
def road():
    return RoadPath.straight(
        RoadNode(id="a", position=Point(0, 0, 0)), RoadNode(id="b", position=Point(10, 0, 0))
    )


def _taxi(tid, road, t) -> Taxi:
    taxi = Taxi(id=tid)
    taxi.place(road, t)
    return taxi


def test_close_pair_reverses_once_per_cooldown(road):
    a, b = _taxi("a", road, 0.50), _taxi("b", road, 0.53)  # 0.3 apart
    det = CollisionDetector()

    assert det.check([a, b], 16.0) == [("a", "b")]
    for taxi in (a, b):
        assert taxi.is_reversing
        assert taxi.collision_cooldown_ms == pytest.approx(2000.0)

    # still overlapping and no longer reversing, but inside the cooldown window
    a.is_reversing = b.is_reversing = False
    assert det.check([a, b], 16.0) == []
    assert a.collision_cooldown_ms == pytest.approx(1984.0)


def test_cooldown_expires_and_floors_at_zero(road):
    a, b = _taxi("a", road, 0.5), _taxi("b", road, 0.5)
    det = CollisionDetector(cooldown_ms=100.0)
    det.check([a, b], 0.0)
    a.is_reversing = b.is_reversing = False

    assert det.check([a, b], 250.0) == [("a", "b")]

    lone = Taxi(id="c", collision_cooldown_ms=50.0)
    lone.tick_cooldown(200.0)
    assert lone.collision_cooldown_ms == 0.0
    assert not lone.on_cooldown


def test_distant_and_reversing_taxis_are_ignored(road):
    det = CollisionDetector()
    assert det.check([_taxi("a", road, 0.1), _taxi("b", road, 0.9)], 16.0) == []

    c, d = _taxi("c", road, 0.5), _taxi("d", road, 0.5)
    c.is_reversing = True
    assert det.check([c, d], 16.0) == []
    assert not d.is_reversing


def test_every_pair_is_checked(road):
    taxis = [_taxi(f"t{i}", road, 0.5 + 0.01 * i) for i in range(3)]
    hits = CollisionDetector().check(taxis, 16.0)
    # the first pair to touch sends both into reverse, the third has no free partner
    assert hits == [("t0", "t1")]
    assert not taxis[2].is_reversing
