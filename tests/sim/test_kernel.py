# tests/sim/test_kernel.py
from dataclasses import dataclass

import pytest

from taxi_sim.sim.event import BaseEvent
from taxi_sim.sim.hooks import NoopHooks
from taxi_sim.sim.kernel import Kernel


# ---- demo domain events ----
@dataclass(order=True)
class Ping(BaseEvent):
    n: int = 0


@dataclass(order=True)
class Pong(BaseEvent):
    n: int = 0


# ---- demo handlers ----
def handle_ping(ev: Ping):
    out: list[BaseEvent] = [Pong(t=ev.t, n=ev.n)]
    if ev.n > 0:
        out.append(Ping(t=ev.t, n=ev.n - 1))
    return out


# --- test hook that records dispatch order & errors ---
class TraceHooks(NoopHooks):
    def __init__(self):
        self.trace = []
        self.errors = []
        self.runs = []

    def dispatch(self, ev, *, seq, handlers):
        self.trace.append((seq, type(ev).__name__, getattr(ev, "n", None)))

    def error(self, *, reason, **kw):
        self.errors.append(reason)

    def run_end(self, *, ticks, last_ms, wall_ms):
        self.runs.append((ticks, last_ms))


def test_publish_is_fifo_with_follow_ups():
    hooks = TraceHooks()
    k = Kernel(hooks=hooks)
    k.on(Ping, handle_ping)
    assert k.publish(Ping(t=0.0, n=1)) == 4
    assert [(name, n) for _, name, n in hooks.trace] == [
        ("Ping", 1),
        ("Pong", 1),
        ("Ping", 0),
        ("Pong", 0),
    ]
    assert [seq for seq, _, _ in hooks.trace] == [1, 2, 3, 4]


def test_handlers_run_in_subscription_order():
    k = Kernel()
    seen: list[str] = []
    k.on(Ping, lambda ev: (seen.append("A"), None)[1])
    k.on(Ping, lambda ev: (seen.append("B"), None)[1])
    k.publish(Ping(t=0.0))
    k.publish(Ping(t=0.0))
    assert seen == ["A", "B", "A", "B"]


def test_systems_run_in_order_each_step():
    k = Kernel()
    calls = []
    k.add_system("first", lambda now, dt: calls.append(("first", now, dt)))

    def second(now, dt):
        calls.append(("second", now, dt))
        return [Ping(t=now)]

    k.add_system("second", second)
    pings = []
    k.on(Ping, pings.append)

    assert k.step(16.0) == 1
    k.step(4.0)
    assert calls == [
        ("first", 16.0, 16.0),
        ("second", 16.0, 16.0),
        ("first", 20.0, 4.0),
        ("second", 20.0, 4.0),
    ]
    assert [p.t for p in pings] == [16.0, 20.0]
    assert k.ticks == 2


def test_run_stops_at_horizon_and_max_ticks():
    hooks = TraceHooks()
    k = Kernel(hooks=hooks)
    assert k.run(until_ms=100.0, tick_ms=30.0) == 4  # 30, 60, 90, 100
    assert k.now == pytest.approx(100.0)
    assert hooks.runs == [(4, 100.0)]

    k2 = Kernel()
    assert k2.run(until_ms=1000.0, tick_ms=10.0, max_ticks=3) == 3
    assert k2.now == 30.0


def test_negative_delta_is_reported_and_raises():
    hooks = TraceHooks()
    k = Kernel(hooks=hooks)
    with pytest.raises(ValueError):
        k.step(-1.0)
    assert hooks.errors == ["negative_dt"]
    assert k.now == 0.0

    with pytest.raises(ValueError):
        k.run(until_ms=10.0, tick_ms=0.0)
