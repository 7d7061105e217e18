from collections.abc import Sequence
from typing import Literal

import numpy as np

from taxi_sim.domain.entities.geography import RoadPath
from taxi_sim.domain.entities.motion import tangent_in, tangent_out

Turn = Literal["straight", "left", "right"]

# empirically chosen; exposed through RoutingModel for calibration
STRAIGHT_DOT = 0.8  # ~36 degrees either side of dead ahead
TURN_CROSS = 0.1


def _unit(v) -> np.ndarray:
    a = np.asarray(v, dtype=float)
    n = np.linalg.norm(a)
    return a if n == 0 else a / n


def turn_between(
    incoming: Sequence[float],
    outgoing: Sequence[float],
    *,
    straight_dot: float = STRAIGHT_DOT,
    turn_cross: float = TURN_CROSS,
) -> Turn:
    """Classify an outgoing tangent relative to the incoming one (y-up world)."""
    a, b = _unit(incoming), _unit(outgoing)
    if float(np.dot(a, b)) > straight_dot:
        return "straight"
    cy = float(np.cross(a, b)[1])
    if cy > turn_cross:
        return "left"
    if cy < -turn_cross:
        return "right"
    return "straight"


def categorize_paths(
    incoming: RoadPath | Sequence[float],
    candidates: Sequence[RoadPath],
    *,
    straight_dot: float = STRAIGHT_DOT,
    turn_cross: float = TURN_CROSS,
) -> dict[Turn, RoadPath | None]:
    """First candidate per turn kind; a lone candidate always counts as straight."""
    out: dict[Turn, RoadPath | None] = {"straight": None, "left": None, "right": None}
    if len(candidates) == 1:
        out["straight"] = candidates[0]
        return out
    v_in = tangent_in(incoming) if isinstance(incoming, RoadPath) else incoming
    for p in candidates:
        kind = turn_between(v_in, tangent_out(p), straight_dot=straight_dot, turn_cross=turn_cross)
        if out[kind] is None:
            out[kind] = p
    return out
