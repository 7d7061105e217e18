# taxi_sim/app/controllers/traffic.py
from taxi_sim.app.events import TaxisCollided
from taxi_sim.domain.mechanics.mechanics_collisions import CollisionDetector
from taxi_sim.domain.mechanics.mechanics_path_traversers import Mover
from taxi_sim.domain.state import SimContext
from taxi_sim.sim.clock import ms_to_s


class TrafficHandler:
    """Per-tick taxi systems: movement first, then collision checks."""

    def __init__(self, ctx: SimContext, mover: Mover, collisions: CollisionDetector):
        self.ctx = ctx
        self.mover = mover
        self.collisions = collisions

    def move(self, now_ms: float, dt_ms: float):
        self.mover.advance_all(self.ctx.taxi_list(), ms_to_s(dt_ms))
        return []

    def collide(self, now_ms: float, dt_ms: float) -> list[TaxisCollided]:
        hits = self.collisions.check(self.ctx.taxi_list(), dt_ms)
        return [TaxisCollided(t=now_ms, taxi_a=a, taxi_b=b) for a, b in hits]
