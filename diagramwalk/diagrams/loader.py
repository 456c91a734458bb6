"""Load diagram definitions from JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from diagramwalk.navigation import DecisionTree, TreeNode, TreeOption

from .schema import (
    DecisionTreeDiagram,
    Diagram,
    DiagramCatalog,
    DiagramKind,
    NodeContent,
    StepContent,
    Walkthrough,
)

logger = logging.getLogger(__name__)


class DiagramFormatError(ValueError):
    """The diagram file does not have the expected structure."""


def load_catalog(path: Path) -> DiagramCatalog:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise DiagramFormatError(f"{path}: not valid UTF-8") from exc
    data = json.loads(text)
    catalog = parse_catalog(data)
    logger.debug("Loaded %d diagrams from %s", len(catalog), path)
    return catalog


def parse_catalog(data: Any) -> DiagramCatalog:
    if isinstance(data, list):
        entries = data
    elif isinstance(data, dict) and isinstance(data.get("diagrams"), list):
        entries = data["diagrams"]
    else:
        raise DiagramFormatError("Expected a list of diagrams or an object with a 'diagrams' list")

    catalog = DiagramCatalog()
    for position, entry in enumerate(entries):
        diagram = parse_diagram(entry, position)
        if diagram.id in catalog:
            raise DiagramFormatError(f"Duplicate diagram id: {diagram.id}")
        catalog.add(diagram)
    return catalog


def parse_diagram(entry: Any, position: int = 0) -> Diagram:
    where = f"diagrams[{position}]"
    if not isinstance(entry, dict):
        raise DiagramFormatError(f"{where}: expected an object")
    diagram_id = _require_str(entry, "id", where)
    where = f"diagram {diagram_id!r}"
    title = _optional_str(entry, "title", where) or diagram_id
    description = _optional_str(entry, "description", where) or ""

    raw_kind = entry.get("kind", DiagramKind.WALKTHROUGH.value)
    try:
        kind = DiagramKind(raw_kind)
    except ValueError:
        raise DiagramFormatError(f"{where}: unknown kind {raw_kind!r}") from None

    if kind is DiagramKind.WALKTHROUGH:
        return _parse_walkthrough(entry, diagram_id, title, description, where)
    return _parse_decision_tree(entry, diagram_id, title, description, where)


def _parse_walkthrough(
    entry: Dict[str, Any], diagram_id: str, title: str, description: str, where: str
) -> Walkthrough:
    raw_steps = entry.get("steps")
    if not isinstance(raw_steps, list) or not raw_steps:
        raise DiagramFormatError(f"{where}: 'steps' must be a non-empty list")

    steps: List[StepContent] = []
    for index, raw in enumerate(raw_steps):
        step_where = f"{where} step {index}"
        if isinstance(raw, str):
            steps.append(StepContent(title=raw))
            continue
        if not isinstance(raw, dict):
            raise DiagramFormatError(f"{step_where}: expected an object or a string")
        steps.append(
            StepContent(
                title=_require_str(raw, "title", step_where),
                subtitle=_optional_str(raw, "subtitle", step_where),
                description=_optional_str(raw, "description", step_where) or "",
                code_hint=_optional_str(raw, "code_hint", step_where),
                language=_optional_str(raw, "language", step_where),
                color=_optional_str(raw, "color", step_where),
                tooltip=_optional_str(raw, "tooltip", step_where),
            )
        )

    start = entry.get("start", 0)
    if isinstance(start, bool) or not isinstance(start, int):
        raise DiagramFormatError(f"{where}: 'start' must be an integer")
    if start < 0 or start >= len(steps):
        raise DiagramFormatError(f"{where}: 'start' {start} outside 0..{len(steps) - 1}")

    logger.debug("Parsed walkthrough %s with %d steps", diagram_id, len(steps))
    return Walkthrough(
        id=diagram_id, title=title, steps=steps, start=start, description=description
    )


def _parse_decision_tree(
    entry: Dict[str, Any], diagram_id: str, title: str, description: str, where: str
) -> DecisionTreeDiagram:
    raw_nodes = entry.get("nodes")
    if not isinstance(raw_nodes, list) or not raw_nodes:
        raise DiagramFormatError(f"{where}: 'nodes' must be a non-empty list")

    nodes: List[TreeNode] = []
    content: Dict[str, NodeContent] = {}
    for index, raw in enumerate(raw_nodes):
        node_where = f"{where} node {index}"
        if not isinstance(raw, dict):
            raise DiagramFormatError(f"{node_where}: expected an object")
        node_id = _require_str(raw, "id", node_where)
        node_where = f"{where} node {node_id!r}"
        question = _optional_str(raw, "question", node_where) or ""
        result = _optional_str(raw, "result", node_where)

        raw_options = raw.get("options", [])
        if not isinstance(raw_options, list):
            raise DiagramFormatError(f"{node_where}: 'options' must be a list")
        options: List[TreeOption] = []
        for option_index, option in enumerate(raw_options):
            option_where = f"{node_where} option {option_index}"
            if not isinstance(option, dict):
                raise DiagramFormatError(f"{option_where}: expected an object")
            options.append(
                TreeOption(
                    label=_require_str(option, "label", option_where),
                    target=_require_str(option, "next", option_where),
                )
            )

        nodes.append(TreeNode(id=node_id, prompt=question, options=tuple(options), result=result))
        if node_id not in content:
            content[node_id] = NodeContent(
                text=result if result is not None else question,
                color=_optional_str(raw, "color", node_where),
                tooltip=_optional_str(raw, "tooltip", node_where),
                detail=_optional_str(raw, "detail", node_where),
            )

    root_id = entry.get("root", nodes[0].id)
    if not isinstance(root_id, str):
        raise DiagramFormatError(f"{where}: 'root' must be a string")
    tree = DecisionTree.from_nodes(nodes, root_id)

    logger.debug("Parsed decision tree %s with %d nodes", diagram_id, len(tree))
    return DecisionTreeDiagram(
        id=diagram_id, title=title, tree=tree, nodes=content, description=description
    )


def _require_str(data: Dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise DiagramFormatError(f"{where}: '{key}' must be a non-empty string")
    return value


def _optional_str(data: Dict[str, Any], key: str, where: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DiagramFormatError(f"{where}: '{key}' must be a string")
    return value
