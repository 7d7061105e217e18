# domain/network.py
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum

from taxi_sim.domain.entities.geography import NodeId, RoadNode, RoadPath, path_id

log = logging.getLogger(__name__)


class IntersectionStrategy(Enum):
    TOPOLOGICAL = "topological"  # node carries a [N, E, S, W] neighbor array
    VECTOR_GEOMETRY = "vector_geometry"  # legacy successor list, classify by tangents


@dataclass(frozen=True)
class RoadNetwork:
    """Immutable snapshot of nodes plus the directed paths generated from them."""

    nodes: dict[NodeId, RoadNode] = field(default_factory=dict)
    paths: dict[str, RoadPath] = field(default_factory=dict)
    outgoing: dict[NodeId, tuple[RoadPath, ...]] = field(default_factory=dict)
    strategies: dict[NodeId, IntersectionStrategy] = field(default_factory=dict)

    def node(self, node_id: NodeId) -> RoadNode | None:
        return self.nodes.get(node_id)

    def path(self, pid: str) -> RoadPath | None:
        return self.paths.get(pid)

    def next_paths_from(self, node_id: NodeId) -> list[RoadPath]:
        return list(self.outgoing.get(node_id, ()))

    def strategy_for(self, node_id: NodeId) -> IntersectionStrategy:
        return self.strategies.get(node_id, IntersectionStrategy.VECTOR_GEOMETRY)

    def nodes_with_type(self, *types: str) -> list[RoadNode]:
        return [n for n in self.nodes.values() if any(n.has_type(t) for t in types)]

    @property
    def empty(self) -> bool:
        return not self.paths


EMPTY_NETWORK = RoadNetwork()


def _auto_chain(nodes: list[RoadNode]) -> list[RoadNode]:
    """Close a loop through all nodes in sorted-id order (legacy bootstrap)."""
    ordered = sorted(nodes, key=lambda n: n.id)
    if len(ordered) < 2:
        return ordered
    log.info("no connectivity on any node, auto-chaining", extra={"extra": {"nodes": len(ordered)}})
    return [
        replace(n, next=(ordered[(i + 1) % len(ordered)].id,)) for i, n in enumerate(ordered)
    ]


def build_network(nodes: Iterable[RoadNode]) -> RoadNetwork:
    node_list = list(nodes)
    if node_list and not any(n.has_connectivity for n in node_list):
        node_list = _auto_chain(node_list)

    by_id: dict[NodeId, RoadNode] = {}
    for n in node_list:
        if n.id in by_id:
            log.warning("duplicate node id, keeping first", extra={"extra": {"node_id": n.id}})
            continue
        by_id[n.id] = n

    paths: dict[str, RoadPath] = {}
    outgoing: dict[NodeId, list[RoadPath]] = {}
    for n in by_id.values():
        for target_id in n.outgoing_ids():
            pid = path_id(n.id, target_id)
            if pid in paths:
                continue  # shared endpoints produce the same directed id
            target = by_id.get(target_id)
            if target is None:
                log.warning(
                    "connection to unknown node skipped",
                    extra={"extra": {"node_id": n.id, "target": target_id}},
                )
                continue
            if target_id == n.id:
                log.warning("self-loop skipped", extra={"extra": {"node_id": n.id}})
                continue
            p = RoadPath.straight(n, target)
            paths[pid] = p
            outgoing.setdefault(n.id, []).append(p)

    strategies = {
        nid: (
            IntersectionStrategy.TOPOLOGICAL
            if n.neighbors is not None
            else IntersectionStrategy.VECTOR_GEOMETRY
        )
        for nid, n in by_id.items()
    }
    return RoadNetwork(
        nodes=by_id,
        paths=paths,
        outgoing={k: tuple(v) for k, v in outgoing.items()},
        strategies=strategies,
    )
