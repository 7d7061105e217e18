# domain/entities/delivery.py
from dataclasses import dataclass
from typing import Literal

DeliveryStatus = Literal["waiting_pickup", "in_transit", "completed"]


@dataclass
class DeliveryEvent:
    id: str
    pickup_node_id: str
    dropoff_node_id: str
    payout: int
    multiplier: int  # size tier 1..4
    color: str
    spawn_ms: float
    status: DeliveryStatus = "waiting_pickup"
    claimed_by_taxi_id: str | None = None
    pickup_ms: float | None = None
    delivered_ms: float | None = None

    def __post_init__(self):
        if self.pickup_node_id == self.dropoff_node_id:
            raise ValueError(f"delivery {self.id}: pickup and dropoff must differ")
        if not 1 <= self.multiplier <= 4:
            raise ValueError(f"delivery {self.id}: multiplier must be in 1..4")

    @property
    def active(self) -> bool:
        return self.status != "completed"

    def mark_picked_up(self, taxi_id: str, now_ms: float) -> None:
        if self.status != "waiting_pickup":
            raise ValueError(f"delivery {self.id} is {self.status}, cannot be picked up")
        self.status = "in_transit"
        self.claimed_by_taxi_id = taxi_id
        self.pickup_ms = now_ms

    def mark_completed(self, now_ms: float) -> None:
        if self.status != "in_transit":
            raise ValueError(f"delivery {self.id} is {self.status}, cannot be completed")
        self.status = "completed"
        self.delivered_ms = now_ms

    def node_ids(self) -> tuple[str, str]:
        return self.pickup_node_id, self.dropoff_node_id
