import math
from dataclasses import dataclass, field
from typing import Literal

NodeId = str
Dir = int  # 0=N, 1=E, 2=S, 3=W (topological slots, not world compass)

NodeType = Literal["path", "intersection", "pickup", "dropoff", "red_light", "service"]
NODE_TYPES: tuple[str, ...] = ("path", "intersection", "pickup", "dropoff", "red_light", "service")

PATH_SEP = "_to_"


# Core geometry types used by mechanics
@dataclass(frozen=True)
class Point:
    x: float  # world units, y-up
    y: float = 0.0
    z: float = 0.0

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def dist(self, other: "Point") -> float:
        return math.dist((self.x, self.y, self.z), (other.x, other.y, other.z))

    def lerp(self, other: "Point", f: float) -> "Point":
        return Point(
            self.x + f * (other.x - self.x),
            self.y + f * (other.y - self.y),
            self.z + f * (other.z - self.z),
        )


@dataclass(frozen=True)
class NodeMetadata:
    zone_name: str | None = None
    payout_multiplier: float = 1.0
    red_light_s: float | None = None
    green_light_s: float | None = None
    repair_rate: float | None = None
    service_cost: int | None = None


@dataclass(frozen=True)
class RoadNode:
    id: NodeId
    position: Point
    neighbors: tuple[NodeId | None, ...] | None = None  # [N, E, S, W]
    next: tuple[NodeId, ...] = ()
    types: frozenset[str] = frozenset({"path"})
    metadata: NodeMetadata = field(default_factory=NodeMetadata)

    def __post_init__(self):
        if self.neighbors is not None and len(self.neighbors) != 4:
            raise ValueError(
                f"node {self.id!r}: neighbors must have exactly 4 slots, got {len(self.neighbors)}"
            )

    def has_type(self, t: str) -> bool:
        return t in self.types

    @property
    def connection_count(self) -> int:
        if self.neighbors is None:
            return 0
        return sum(1 for n in self.neighbors if n is not None)

    @property
    def intersection_eligible(self) -> bool:
        return self.connection_count >= 2

    @property
    def has_connectivity(self) -> bool:
        return self.connection_count > 0 or bool(self.next)

    def outgoing_ids(self) -> list[NodeId]:
        """Neighbor slots in N, E, S, W order when present, else the successor list."""
        if self.neighbors is not None:
            return [n for n in self.neighbors if n is not None]
        return list(self.next)

    def slot_of(self, node_id: NodeId) -> Dir | None:
        if self.neighbors is None:
            return None
        for d, n in enumerate(self.neighbors):
            if n == node_id:
                return d
        return None


@dataclass(frozen=True)
class RoadPath:
    id: str
    points: tuple[Point, ...]
    length: float
    source: NodeId | None = None
    dest: NodeId | None = None

    @classmethod
    def straight(cls, a: RoadNode, b: RoadNode) -> "RoadPath":
        return cls(
            id=path_id(a.id, b.id),
            points=(a.position, b.position),
            length=a.position.dist(b.position),
            source=a.id,
            dest=b.id,
        )


def path_id(source: NodeId, dest: NodeId) -> str:
    return f"{source}{PATH_SEP}{dest}"


def split_path_id(pid: str) -> tuple[NodeId, NodeId] | None:
    src, sep, dst = pid.partition(PATH_SEP)
    if not sep or not src or not dst:
        return None
    return src, dst


def polyline_length(points) -> float:
    return sum(points[i].dist(points[i + 1]) for i in range(len(points) - 1))
