import json
import os
from math import isfinite
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from taxi_sim.policy.palette import DELIVERY_COLORS
from taxi_sim.policy.sizing import BUCKET_BOUNDS, TIER_WEIGHTS


class SimModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    seed: int
    duration_s: float = 180.0  # one shift
    tick_ms: float = 16.0
    rush_hour_s: float = 30.0
    pause_cost: int = 10

    @field_validator("duration_s", "tick_ms")
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator("rush_hour_s", "pause_cost")
    def _nonneg(cls, v, info: ValidationInfo):
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1


# ----------------- NETWORK ---------------------


class NodeMetadataModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    zone_name: str | None = None
    payout_multiplier: float = 1.0
    red_light_s: float | None = None
    green_light_s: float | None = None
    repair_rate: float | None = None
    service_cost: int | None = None

    @field_validator("payout_multiplier")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not isfinite(v) or v < 0:
            raise ValueError("payout_multiplier must be finite and >= 0")
        return v


class NodeRecordModel(BaseModel):
    """One node as exported from the scene.

    Connectivity comes either as a 4-slot ``neighbors`` list, as four named
    ``north/east/south/west`` properties, or as a ``next`` successor list
    (list, JSON array string, or comma-delimited string).
    """

    model_config = ConfigDict(extra="forbid")
    id: str
    position: tuple[float, float, float]
    neighbors: list[str | None] | None = None
    north: str | None = None
    east: str | None = None
    south: str | None = None
    west: str | None = None
    next: list[str] = Field(default_factory=list)
    types: list[str] | None = None
    metadata: NodeMetadataModel = NodeMetadataModel()

    @field_validator("position", mode="before")
    @classmethod
    def _xy_to_xyz(cls, v):
        if isinstance(v, dict):
            return (v.get("x", 0.0), v.get("y", 0.0), v.get("z", 0.0))
        if isinstance(v, (list, tuple)) and len(v) == 2:
            # flat maps: (x, z) on the ground plane
            return (v[0], 0.0, v[1])
        return v

    @field_validator("neighbors", mode="before")
    @classmethod
    def _blank_slots(cls, v):
        if isinstance(v, (list, tuple)):
            return [n if n else None for n in v]
        return v

    @field_validator("neighbors")
    @classmethod
    def _four_slots(cls, v):
        if v is not None and len(v) != 4:
            raise ValueError(f"neighbors must have exactly 4 slots, got {len(v)}")
        return v

    @field_validator("next", mode="before")
    @classmethod
    def _parse_next(cls, v):
        return parse_next(v)

    @model_validator(mode="after")
    def _directional_props(self):
        named = (self.north, self.east, self.south, self.west)
        if any(named):
            if self.neighbors is not None:
                raise ValueError("give either neighbors or north/east/south/west, not both")
            self.neighbors = [n if n else None for n in named]
        return self


def parse_next(v: Any) -> list[str]:
    """Successor lists arrive as lists, JSON array strings, or "a, b, c"."""
    if v is None:
        return []
    if isinstance(v, str):
        s = v.strip()
        if not s:
            return []
        if s.startswith("["):
            try:
                v = json.loads(s)
            except json.JSONDecodeError as e:
                raise ValueError(f"next is not a valid JSON array: {e}") from e
        else:
            return [p.strip() for p in s.split(",") if p.strip()]
    if not isinstance(v, (list, tuple)):
        raise ValueError(f"next must be a list or string, got {type(v).__name__}")
    return [str(p).strip() for p in v if p is not None and str(p).strip()]


class NetworkModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    nodes: list[NodeRecordModel] = Field(default_factory=list)
    nodes_file: str | None = None

    @field_validator("nodes_file")
    @classmethod
    def _expand(cls, v: str | None) -> str | None:
        return os.path.expandvars(os.path.expanduser(v)) if v else v


# ----------------- FLEET / ROUTING / COLLISIONS ---------------------


class FleetModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    spawn_node_id: str = "StarterNode"
    start_money: int = 100
    speed: float = 1.5  # world units per second
    max_taxis: int = 3
    taxi_cost: int = 300
    cost_step: int = 100

    @field_validator("speed")
    @classmethod
    def _speed(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("speed must be > 0")
        return v

    @field_validator("max_taxis")
    @classmethod
    def _max(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_taxis must be >= 1")
        return v


class RoutingModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    straight_dot: float = 0.8
    turn_cross: float = 0.1


class CollisionModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    threshold: float = 0.5
    cooldown_ms: float = 2000.0


class DeliveryModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    spawn_interval_s: float = 10.0
    rush_spawn_interval_s: float = 5.0
    pickup_radius: float = 2.0
    dropoff_radius: float = 2.0
    initial_spawn: bool = True
    palette: list[str] = Field(default_factory=lambda: list(DELIVERY_COLORS))

    @field_validator("spawn_interval_s", "rush_spawn_interval_s", "pickup_radius", "dropoff_radius")
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator("palette")
    @classmethod
    def _palette(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("palette must not be empty")
        return v


# ------------------ POLICIES -----------------------------


class PricingPolicyDistanceModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["distance"] = "distance"
    base: float = 100.0
    rate: float = 10.0
    tier_scale: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)

    @model_validator(mode="after")
    def _monotone(self):
        if self.rate < 0:
            raise ValueError("rate must be >= 0 so payout never drops with distance")
        if any(s <= 0 for s in self.tier_scale):
            raise ValueError("tier_scale factors must be > 0")
        return self


PricingPolicyUnion = Annotated[PricingPolicyDistanceModel, Field(discriminator="kind")]


class SizingPolicyDistanceBucketsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["distance_buckets"] = "distance_buckets"
    bounds: list[float] = Field(default_factory=lambda: list(BUCKET_BOUNDS))
    weights: list[tuple[float, float, float, float]] = Field(
        default_factory=lambda: [tuple(w) for w in TIER_WEIGHTS]
    )

    @model_validator(mode="after")
    def _check_weights(self):
        if sorted(self.bounds) != self.bounds:
            raise ValueError("bounds must be ascending")
        n = len(self.bounds) + 1
        if len(self.weights) != n:
            raise ValueError(f"weights must have {n} rows, got {len(self.weights)}")
        for row in self.weights:
            # reject NaN/Inf and non-positive sums early (friendlier than numpy error)
            if any(not isfinite(x) or x < 0 for x in row):
                raise ValueError("weights must be finite and >= 0")
            if sum(row) <= 0:
                raise ValueError("each weights row must sum to a positive value")
        return self


SizingPolicyUnion = Annotated[SizingPolicyDistanceBucketsModel, Field(discriminator="kind")]


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str
    sim: SimModel
    log: LogModel = LogModel()
    network: NetworkModel = NetworkModel()
    fleet: FleetModel = FleetModel()
    routing: RoutingModel = RoutingModel()
    collision: CollisionModel = CollisionModel()
    delivery: DeliveryModel = DeliveryModel()
    pricing: PricingPolicyUnion = Field(default_factory=PricingPolicyDistanceModel)
    sizing: SizingPolicyUnion = Field(default_factory=SizingPolicyDistanceBucketsModel)
