"""
Intersection topology: classification and priority-table turn routing.

Slots are topological ([N, E, S, W] per node), so "incoming" is the slot the
taxi entered from and "outgoing" the slot it leaves through.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from taxi_sim.domain.entities.geography import Dir, NodeId, RoadNode

log = logging.getLogger(__name__)

Mode = Literal["pass_through", "turn_left", "turn_right"]
MODES: tuple[Mode, ...] = ("pass_through", "turn_left", "turn_right")

NORTH, EAST, SOUTH, WEST = 0, 1, 2, 3
DIR_NAMES = ("North", "East", "South", "West")

Shape = Literal["isolated", "dead_end", "corner", "intersection"]

# (incoming slot, mode) -> slots to try, in order. Each row is a full permutation,
# the entrance is skipped while iterating.
PRIORITY: dict[tuple[Dir, Mode], tuple[Dir, Dir, Dir, Dir]] = {
    (SOUTH, "pass_through"): (NORTH, EAST, SOUTH, WEST),
    (SOUTH, "turn_right"): (EAST, SOUTH, WEST, NORTH),
    (SOUTH, "turn_left"): (WEST, SOUTH, EAST, NORTH),
    (NORTH, "pass_through"): (SOUTH, WEST, NORTH, EAST),
    (NORTH, "turn_right"): (WEST, NORTH, EAST, SOUTH),
    (NORTH, "turn_left"): (EAST, NORTH, WEST, SOUTH),
    (WEST, "pass_through"): (EAST, SOUTH, WEST, NORTH),
    (WEST, "turn_right"): (SOUTH, WEST, NORTH, EAST),
    (WEST, "turn_left"): (NORTH, WEST, SOUTH, EAST),
    (EAST, "pass_through"): (WEST, NORTH, EAST, SOUTH),
    (EAST, "turn_right"): (NORTH, EAST, SOUTH, WEST),
    (EAST, "turn_left"): (SOUTH, EAST, NORTH, WEST),
}


@dataclass(frozen=True)
class Hop:
    next_id: NodeId | None
    outgoing_dir: Dir | None

    @property
    def found(self) -> bool:
        return self.next_id is not None


NO_HOP = Hop(None, None)


def flip(d: Dir) -> Dir:
    """Outgoing slot at one node -> incoming slot at the node it leads to."""
    return (d + 2) % 4


def dir_name(d: Dir | None) -> str:
    return DIR_NAMES[d] if d is not None else "?"


def priority_order(incoming_dir: Dir, mode: Mode) -> tuple[Dir, ...]:
    return PRIORITY[(incoming_dir, mode)]


def classify(node: RoadNode) -> Shape:
    n = node.connection_count
    if n == 0:
        return "isolated"
    if n == 1:
        return "dead_end"
    if n == 2:
        return "corner"
    return "intersection"


def next_hop(node: RoadNode, incoming_dir: Dir, mode: Mode = "pass_through") -> Hop:
    if node.neighbors is None:
        log.warning("node has no neighbor slots", extra={"extra": {"node_id": node.id}})
        return NO_HOP
    if incoming_dir not in (NORTH, EAST, SOUTH, WEST) or mode not in MODES:
        log.warning(
            "bad routing request",
            extra={"extra": {"node_id": node.id, "incoming": incoming_dir, "mode": mode}},
        )
        return NO_HOP

    slots = node.neighbors
    shape = classify(node)

    if shape == "dead_end" and slots[incoming_dir] is not None:
        log.debug("dead end, u-turn", extra={"extra": {"node_id": node.id}})
        return Hop(slots[incoming_dir], incoming_dir)

    if shape == "corner":
        for d in (NORTH, EAST, SOUTH, WEST):
            if d != incoming_dir and slots[d] is not None:
                return Hop(slots[d], d)

    for d in priority_order(incoming_dir, mode):
        if d == incoming_dir:
            continue
        if slots[d] is not None:
            log.debug(
                "route chosen",
                extra={
                    "extra": {
                        "node_id": node.id,
                        "incoming": dir_name(incoming_dir),
                        "mode": mode,
                        "outgoing": dir_name(d),
                    }
                },
            )
            return Hop(slots[d], d)

    log.warning(
        "no exit available",
        extra={"extra": {"node_id": node.id, "incoming": dir_name(incoming_dir), "mode": mode}},
    )
    return NO_HOP


def describe_node(node: RoadNode) -> str:
    if node.neighbors is None:
        return f"{node.id}: not an intersection"
    rows = [f"{node.id} ({classify(node)}):"]
    for d, n in enumerate(node.neighbors):
        rows.append(f"  {DIR_NAMES[d][0]} ({d}): {n or '-'}")
    return "\n".join(rows)
