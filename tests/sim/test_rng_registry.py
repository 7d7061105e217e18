# tests/sim/test_rng_registry.py
import numpy as np

from taxi_sim.sim.rng import RNGRegistry


def test_named_streams_are_deterministic():
    reg1 = RNGRegistry(123, scenario="A")
    reg2 = RNGRegistry(123, scenario="A")
    a1 = reg1.stream("deliveries").random(5)
    a2 = reg2.stream("deliveries").random(5)
    assert np.allclose(a1, a2)


def test_streams_are_independent():
    reg = RNGRegistry(123)
    a = reg.stream("deliveries").random(5)
    b = reg.stream("routing").random(5)
    assert not np.allclose(a, b)


def test_stream_is_cached_per_name():
    reg = RNGRegistry(123)
    assert reg.stream("sizing") is reg.stream("sizing")


def test_scenarios_are_disjoint():
    a = RNGRegistry(123, scenario="small_city").stream("deliveries").random(10)
    b = RNGRegistry(123, scenario="harbor").stream("deliveries").random(10)
    assert not np.allclose(a, b)
