# sim/kernel.py

import time
from collections import deque
from collections.abc import Callable, Iterable

from .event import BaseEvent
from .hooks import KernelHooks, NoopHooks

Handler = Callable[[BaseEvent], Iterable[BaseEvent] | None]
System = Callable[[float, float], Iterable[BaseEvent] | None]  # (now_ms, dt_ms)


class Kernel:
    """Frame-driven loop: every step runs the registered systems once, in order.

    Systems and handlers may return events; those are dispatched to subscribers
    within the same step, FIFO, before the next system runs.
    """

    def __init__(self, hooks: KernelHooks | None = None):
        self._now = 0.0
        self._ticks = 0
        self._seq = 0
        self._systems: list[tuple[str, System]] = []
        self._subs: dict[type[BaseEvent], list[Handler]] = {}
        self._hooks = hooks or NoopHooks()

    @property
    def now(self) -> float:
        return self._now

    @property
    def ticks(self) -> int:
        return self._ticks

    def on(self, etype: type[BaseEvent], handler: Handler) -> None:
        self._subs.setdefault(etype, []).append(handler)

    def add_system(self, name: str, system: System) -> None:
        self._systems.append((name, system))

    def publish(self, ev: BaseEvent) -> int:
        """Dispatch ``ev`` and everything its handlers produce. Returns the count."""
        q: deque[BaseEvent] = deque([ev])
        n = 0
        while q:
            cur = q.popleft()
            self._seq += 1
            handlers = self._subs.get(type(cur), ())
            self._hooks.dispatch(cur, seq=self._seq, handlers=len(handlers))
            for h in handlers:
                q.extend(h(cur) or ())
            n += 1
        return n

    def step(self, dt_ms: float) -> int:
        if dt_ms < 0:
            self._hooks.error(reason="negative_dt", dt_ms=dt_ms, now_ms=self._now)
            raise ValueError(f"tick delta must be >= 0, got {dt_ms}")
        t1 = time.perf_counter()
        self._ticks += 1
        self._now += dt_ms
        self._hooks.tick_start(tick=self._ticks, now_ms=self._now, dt_ms=dt_ms)
        events = 0
        for _, system in self._systems:
            for ev in system(self._now, dt_ms) or ():
                events += self.publish(ev)
        self._hooks.tick_end(
            tick=self._ticks, now_ms=self._now, events=events, ms=(time.perf_counter() - t1) * 1000
        )
        return events

    def run(
        self, until_ms: float, tick_ms: float = 16.0, max_ticks: int | None = None
    ) -> int:
        if tick_ms <= 0:
            raise ValueError(f"tick_ms must be > 0, got {tick_ms}")
        t0 = time.perf_counter()
        self._hooks.run_start(until_ms=until_ms, tick_ms=tick_ms)
        ticks = 0
        while self._now + 1e-9 < until_ms:
            self.step(min(tick_ms, until_ms - self._now))
            ticks += 1
            if max_ticks and ticks >= max_ticks:
                break
        self._hooks.run_end(
            ticks=ticks, last_ms=self._now, wall_ms=(time.perf_counter() - t0) * 1000
        )
        return ticks
