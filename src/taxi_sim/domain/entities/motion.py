import math

from taxi_sim.domain.entities.geography import Point, RoadPath


def clamp01(t: float) -> float:
    return 0.0 if t < 0.0 else 1.0 if t > 1.0 else t


def sample_path(path: RoadPath, t: float) -> Point:
    """Piecewise-linear position along ``path`` at normalized ``t``.

    Endpoints are exact: ``t <= 0`` gives the first point and ``t >= 1`` the last.
    """
    pts = path.points
    if not pts:
        return Point(0.0, 0.0, 0.0)
    if len(pts) == 1:
        return pts[0]
    t = clamp01(t)
    span = t * (len(pts) - 1)
    i = math.floor(span)
    if i >= len(pts) - 1:
        return pts[-1]
    return pts[i].lerp(pts[i + 1], span - i)


def tangent_in(path: RoadPath) -> tuple[float, float, float]:
    """Direction of travel on the last segment (arriving at the destination)."""
    a, b = path.points[-2], path.points[-1]
    return (b.x - a.x, b.y - a.y, b.z - a.z)


def tangent_out(path: RoadPath) -> tuple[float, float, float]:
    """Direction of travel on the first segment (leaving the source)."""
    a, b = path.points[0], path.points[1]
    return (b.x - a.x, b.y - a.y, b.z - a.z)
