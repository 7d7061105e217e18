# tests/conftest.py
import numpy as np
import pytest

from taxi_sim.domain.entities.geography import NodeMetadata, Point, RoadNode
from taxi_sim.domain.state import SimContext


@pytest.fixture
def make_node():
    def _make(node_id, x=0.0, z=0.0, *, neighbors=None, next=(), types=("path",), multiplier=1.0):
        return RoadNode(
            id=node_id,
            position=Point(x, 0.0, z),
            neighbors=tuple(neighbors) if neighbors is not None else None,
            next=tuple(next),
            types=frozenset(types),
            metadata=NodeMetadata(payout_multiplier=multiplier),
        )

    return _make


@pytest.fixture
def cross_nodes(make_node):
    # C in the middle with four dead ends around it; -z is north
    return [
        make_node("C", 0, 0, neighbors=("N", "E", "S", "W"), types=("intersection",)),
        make_node("N", 0, -10, neighbors=(None, None, "C", None)),
        make_node("E", 10, 0, neighbors=(None, None, None, "C")),
        make_node("S", 0, 10, neighbors=("C", None, None, None)),
        make_node("W", -10, 0, neighbors=(None, "C", None, None)),
    ]


@pytest.fixture
def cross_ctx(cross_nodes):
    ctx = SimContext()
    ctx.rebuild(cross_nodes)
    return ctx


@pytest.fixture
def triangle_nodes(make_node):
    # legacy successor lists, A -> B -> C -> A
    return [
        make_node("A", 0, 0, next=("B",)),
        make_node("B", 3, 4, next=("C",)),
        make_node("C", 0, 8, next=("A",)),
    ]


@pytest.fixture
def rng():
    return np.random.default_rng(0)
