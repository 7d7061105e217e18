# sim/hooks.py
from typing import Protocol

from taxi_sim.sim.event import BaseEvent


class KernelHooks(Protocol):
    def run_start(self, *, until_ms, tick_ms): ...
    def run_end(self, *, ticks, last_ms, wall_ms): ...
    def tick_start(self, *, tick, now_ms, dt_ms): ...
    def tick_end(self, *, tick, now_ms, events, ms): ...
    def dispatch(self, ev: BaseEvent, *, seq, handlers): ...
    def error(self, *, reason: str, **kw): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def run_end(self, **_):
        pass

    def tick_start(self, **_):
        pass

    def tick_end(self, **_):
        pass

    def dispatch(self, *_, **__):
        pass

    def error(self, *_, **__):
        pass
