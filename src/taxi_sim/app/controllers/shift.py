# taxi_sim/app/controllers/shift.py
import logging

from taxi_sim.app.events import PauseToggled, RushHourStarted, ShiftEnded
from taxi_sim.domain.state import SimContext
from taxi_sim.sim.clock import ShiftClock
from taxi_sim.sim.event import BaseEvent

log = logging.getLogger(__name__)


class ShiftHandler:
    """Counts the shift down, announces rush hour and the end of the shift."""

    def __init__(self, ctx: SimContext, clock: ShiftClock, *, pause_cost: int = 10):
        self.ctx = ctx
        self.clock = clock
        self.pause_cost = pause_cost
        self._rush_announced = False
        self._ended = False

    @property
    def paused(self) -> bool:
        return self.clock.paused

    def tick(self, now_ms: float, dt_ms: float) -> list[BaseEvent]:
        if self._ended:
            return []
        self.clock.advance(dt_ms)
        out: list[BaseEvent] = []
        if self.clock.rush_hour and not self._rush_announced:
            self._rush_announced = True
            log.info("rush hour", extra={"extra": {"remaining_ms": self.clock.remaining_ms}})
            out.append(RushHourStarted(t=now_ms, remaining_ms=self.clock.remaining_ms))
        if self.clock.over:
            self._ended = True
            total = self.ctx.total_money
            log.info("shift ended", extra={"extra": {"total_money": total}})
            out.append(ShiftEnded(t=now_ms, total_money=total))
        return out

    def toggle_pause(self, now_ms: float) -> PauseToggled | None:
        """Pausing costs money taken from the first taxi; resuming is free."""
        if self.clock.paused:
            self.clock.paused = False
            return PauseToggled(t=now_ms, paused=False)

        if self.ctx.total_money < self.pause_cost:
            log.warning(
                "not enough money to pause",
                extra={"extra": {"cost": self.pause_cost, "money": self.ctx.total_money}},
            )
            return None
        taxis = self.ctx.taxi_list()
        if taxis:
            taxis[0].charge(self.pause_cost)
        self.clock.paused = True
        return PauseToggled(t=now_ms, paused=True, cost=self.pause_cost)
