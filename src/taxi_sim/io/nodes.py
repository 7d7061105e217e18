# src/taxi_sim/io/nodes.py
import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from taxi_sim.config.models import NodeRecordModel
from taxi_sim.domain.entities.geography import NODE_TYPES, NodeMetadata, Point, RoadNode

log = logging.getLogger(__name__)

# substring of the lower-cased id -> tag; every match adds its tag
_ID_CONVENTION: tuple[tuple[str, str], ...] = (
    ("intersection", "intersection"),
    ("pickup", "pickup"),
    ("dropoff", "dropoff"),
    ("redlight", "red_light"),
    ("red_light", "red_light"),
    ("service", "service"),
)


def parse_node_types(node_id: str, declared: Iterable[str] | None = None) -> frozenset[str]:
    """Declared tags when present (unknown ones dropped), else derived from the id."""
    if declared is not None:
        tags = {t.strip().lower() for t in declared if t and t.strip()}
        unknown = tags - set(NODE_TYPES)
        if unknown:
            log.warning(
                "unknown node types ignored",
                extra={"extra": {"node_id": node_id, "types": sorted(unknown)}},
            )
        tags &= set(NODE_TYPES)
        if tags:
            return frozenset(tags)

    lid = node_id.lower()
    derived = frozenset(tag for needle, tag in _ID_CONVENTION if needle in lid)
    return derived or frozenset({"path"})


def node_from_record(rec: NodeRecordModel | Mapping) -> RoadNode:
    r = rec if isinstance(rec, NodeRecordModel) else NodeRecordModel.model_validate(rec)
    return RoadNode(
        id=r.id,
        position=Point(*r.position),
        neighbors=tuple(r.neighbors) if r.neighbors is not None else None,
        next=tuple(r.next),
        types=parse_node_types(r.id, r.types),
        metadata=NodeMetadata(**r.metadata.model_dump()),
    )


def nodes_from_records(records: Iterable[NodeRecordModel | Mapping]) -> list[RoadNode]:
    return [node_from_record(r) for r in records]


def load_nodes(path: str | Path) -> list[RoadNode]:
    """Read a JSON node export: a list of records, or {"nodes": [...]}."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    records = raw["nodes"] if isinstance(raw, dict) else raw
    nodes = nodes_from_records(records)
    log.info("nodes loaded", extra={"extra": {"path": str(path), "count": len(nodes)}})
    return nodes
