# src/taxi_sim/io/config.py
import json
from pathlib import Path

from taxi_sim.config.models import ScenarioModel
from taxi_sim.domain.entities.geography import RoadNode
from taxi_sim.io.nodes import load_nodes, nodes_from_records


def load_scenario(path: str | Path) -> ScenarioModel:
    """Read and validate a scenario JSON file.

    A relative ``network.nodes_file`` is resolved against the scenario's folder.
    """
    path = Path(path)
    model = ScenarioModel.model_validate(json.loads(path.read_text(encoding="utf-8")))
    nf = model.network.nodes_file
    if nf and not Path(nf).is_absolute():
        model.network.nodes_file = str(path.parent / nf)
    return model


def scenario_nodes(model: ScenarioModel) -> list[RoadNode]:
    """Inline node records followed by the ones from ``nodes_file``."""
    nodes = nodes_from_records(model.network.nodes)
    if model.network.nodes_file:
        nodes.extend(load_nodes(model.network.nodes_file))
    return nodes
