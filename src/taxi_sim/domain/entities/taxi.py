# domain/entities/taxi.py
from dataclasses import dataclass
from typing import Literal

from taxi_sim.domain.entities.delivery import DeliveryEvent
from taxi_sim.domain.entities.geography import Dir, Point, RoadPath
from taxi_sim.domain.entities.motion import clamp01, sample_path

TaxiState = Literal[
    "idle", "driving_to_pickup", "driving_to_dropoff", "stopped", "needs_service", "broken"
]

# states in which the mover leaves the taxi where it is
HALTED: frozenset[str] = frozenset({"stopped", "broken"})


@dataclass
class Taxi:
    id: str
    path: RoadPath | None = None
    t: float = 0.0
    speed: float = 1.5  # world units per second
    state: TaxiState = "driving_to_pickup"

    # navigation context
    current_intersection_id: str | None = None
    incoming_dir: Dir | None = None
    previous_node_id: str | None = None

    # delivery
    has_package: bool = False
    current_delivery_id: str | None = None
    money: int = 0

    # collision
    is_reversing: bool = False
    collision_cooldown_ms: float = 0.0

    def __post_init__(self):
        self.t = clamp01(self.t)

    @property
    def position(self) -> Point | None:
        return sample_path(self.path, self.t) if self.path else None

    def place(self, path: RoadPath, t: float = 0.0) -> None:
        self.path = path
        self.t = clamp01(t)
        self.is_reversing = False
        self.current_intersection_id = None
        self.incoming_dir = None
        self.previous_node_id = None

    def enter_intersection(self, node_id: str, incoming_dir: Dir) -> None:
        self.current_intersection_id = node_id
        self.incoming_dir = incoming_dir

    # ---- collisions

    @property
    def on_cooldown(self) -> bool:
        return self.collision_cooldown_ms > 0

    def tick_cooldown(self, dt_ms: float) -> None:
        if self.collision_cooldown_ms > 0:
            self.collision_cooldown_ms = max(0.0, self.collision_cooldown_ms - dt_ms)

    def start_reversing(self, cooldown_ms: float) -> None:
        self.is_reversing = True
        self.collision_cooldown_ms = cooldown_ms

    # ---- deliveries

    def claim(self, delivery: DeliveryEvent, now_ms: float) -> None:
        if self.has_package:
            raise ValueError(
                f"taxi {self.id} already carries {self.current_delivery_id}, cannot claim {delivery.id}"
            )
        delivery.mark_picked_up(self.id, now_ms)
        self.has_package = True
        self.current_delivery_id = delivery.id
        self.state = "driving_to_dropoff"

    def complete(self, delivery: DeliveryEvent, now_ms: float) -> int:
        if delivery.id != self.current_delivery_id:
            raise ValueError(f"taxi {self.id} does not carry {delivery.id}")
        delivery.mark_completed(now_ms)
        self.money += delivery.payout
        self.has_package = False
        self.current_delivery_id = None
        self.state = "driving_to_pickup"
        return delivery.payout

    def charge(self, amount: int) -> None:
        self.money -= amount
