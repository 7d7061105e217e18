# app/events.py
from dataclasses import dataclass

from taxi_sim.sim.event import BaseEvent


# Network
@dataclass(order=True)
class NetworkRebuilt(BaseEvent):
    nodes: int
    paths: int


@dataclass(order=True)
class IntersectionModeChanged(BaseEvent):
    node_id: str
    mode: str


# Delivery lifecycle
@dataclass(order=True)
class DeliverySpawned(BaseEvent):
    delivery_id: str
    pickup_node_id: str
    dropoff_node_id: str
    payout: int
    multiplier: int
    color: str


@dataclass(order=True)
class DeliverySpawnSkipped(BaseEvent):
    free_nodes: int


@dataclass(order=True)
class DeliveryPickedUp(BaseEvent):
    delivery_id: str
    taxi_id: str


@dataclass(order=True)
class DeliveryCompleted(BaseEvent):
    delivery_id: str
    taxi_id: str
    payout: int


# Taxis
@dataclass(order=True)
class TaxisCollided(BaseEvent):
    taxi_a: str
    taxi_b: str


@dataclass(order=True)
class TaxiPurchased(BaseEvent):
    taxi_id: str
    cost: int


# Shift
@dataclass(order=True)
class RushHourStarted(BaseEvent):
    remaining_ms: float


@dataclass(order=True)
class ShiftEnded(BaseEvent):
    total_money: int


@dataclass(order=True)
class PauseToggled(BaseEvent):
    paused: bool
    cost: int = 0
