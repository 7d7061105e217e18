# taxi_sim/app/controllers/intersections.py
from taxi_sim.app.events import IntersectionModeChanged
from taxi_sim.domain.mechanics.mechanics_topology import Mode
from taxi_sim.domain.state import SimContext


class IntersectionController:
    """Player-facing mode switching; every change becomes a kernel event."""

    def __init__(self, ctx: SimContext):
        self.ctx = ctx

    def cycle(self, node_id: str, now_ms: float) -> IntersectionModeChanged | None:
        mode = self.ctx.intersections.cycle(node_id)
        if mode is None:
            return None
        return IntersectionModeChanged(t=now_ms, node_id=node_id, mode=mode)

    def set_mode(self, node_id: str, mode: Mode, now_ms: float) -> IntersectionModeChanged | None:
        if self.ctx.intersections.set_mode(node_id, mode) is None:
            return None
        return IntersectionModeChanged(t=now_ms, node_id=node_id, mode=mode)
