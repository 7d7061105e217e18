# taxi_sim/io/business_events.py

from dataclasses import dataclass

from taxi_sim.app.events import (
    DeliveryCompleted,
    DeliveryPickedUp,
    DeliverySpawned,
    ShiftEnded,
    TaxiPurchased,
    TaxisCollided,
)
from taxi_sim.sim.event import BaseEvent


# Base type for analytics events (not dispatched by the kernel!)
@dataclass
class BizEvent:
    run_id: str
    t: float  # simulation ms
    seq: int  # kernel dispatch sequence (for total ordering)
    name: str  # stable event name


@dataclass
class DeliveryRequestedBiz(BizEvent):
    delivery_id: str
    pickup_node_id: str
    dropoff_node_id: str
    payout: int
    multiplier: int


@dataclass
class DeliveryPickedUpBiz(BizEvent):
    delivery_id: str
    taxi_id: str


@dataclass
class DeliveryCompletedBiz(BizEvent):
    delivery_id: str
    taxi_id: str
    payout: int


@dataclass
class CollisionBiz(BizEvent):
    taxi_a: str
    taxi_b: str


@dataclass
class TaxiPurchasedBiz(BizEvent):
    taxi_id: str
    cost: int


@dataclass
class ShiftSummaryBiz(BizEvent):
    total_money: int


def to_biz(ev: BaseEvent, *, run_id: str, seq: int) -> BizEvent | None:
    """Analytics view of a kernel event; None for events nobody analyses."""
    head = dict(run_id=run_id, t=ev.t, seq=seq)
    match ev:
        case DeliverySpawned():
            return DeliveryRequestedBiz(
                **head,
                name="delivery_requested",
                delivery_id=ev.delivery_id,
                pickup_node_id=ev.pickup_node_id,
                dropoff_node_id=ev.dropoff_node_id,
                payout=ev.payout,
                multiplier=ev.multiplier,
            )
        case DeliveryPickedUp():
            return DeliveryPickedUpBiz(
                **head, name="delivery_picked_up", delivery_id=ev.delivery_id, taxi_id=ev.taxi_id
            )
        case DeliveryCompleted():
            return DeliveryCompletedBiz(
                **head,
                name="delivery_completed",
                delivery_id=ev.delivery_id,
                taxi_id=ev.taxi_id,
                payout=ev.payout,
            )
        case TaxisCollided():
            return CollisionBiz(**head, name="collision", taxi_a=ev.taxi_a, taxi_b=ev.taxi_b)
        case TaxiPurchased():
            return TaxiPurchasedBiz(**head, name="taxi_purchased", taxi_id=ev.taxi_id, cost=ev.cost)
        case ShiftEnded():
            return ShiftSummaryBiz(**head, name="shift_summary", total_money=ev.total_money)
    return None
