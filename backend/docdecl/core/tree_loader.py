"""Build Node trees from nested dicts or JSON files.

Each node is a mapping::

    {"kind": "para", "label": "Title",
     "parameters": {"align": "center", "bold": true},
     "children": [...]}

``parameters`` may also be given as a list mixing flag names and
single-key mappings (``["bold", {"align": "center"}]``).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from docdecl.core.errors import MalformedStructure
from docdecl.core.nodes import Node, NodeKind

logger = logging.getLogger(__name__)


def _build_parameters(raw: Any) -> dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return dict(raw)
    if isinstance(raw, (list, tuple)):
        params: dict[str, Any] = {}
        for item in raw:
            if isinstance(item, str):
                params[item] = True
            elif isinstance(item, dict):
                params.update(item)
            else:
                raise MalformedStructure(f"Unsupported parameter entry: {item!r}")
        return params
    raise MalformedStructure(f"Unsupported parameters value: {raw!r}")


def node_from_dict(data: dict[str, Any]) -> Node:
    """Recursively convert a mapping into a :class:`Node`."""
    if not isinstance(data, dict):
        raise MalformedStructure(f"Node must be a mapping, got {type(data).__name__}")
    kind_name = data.get("kind", "")
    try:
        kind = NodeKind(kind_name)
    except ValueError:
        raise MalformedStructure(f"Unknown node kind: {kind_name!r}") from None

    children = tuple(node_from_dict(c) for c in data.get("children", []))
    return Node(
        kind=kind,
        label=data.get("label"),
        body=data.get("body"),
        parameters=_build_parameters(data.get("parameters")),
        children=children,
    )


def load_tree(path: str | Path) -> Node:
    """Load a node tree from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    tree = node_from_dict(data)
    logger.debug("Loaded %s tree from %s", tree.kind.value, path)
    return tree
