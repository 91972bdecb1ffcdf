"""CSS-style border specifications.

A spec is either a bare style name (``"single"``, meaning every edge) or a
mapping with any of ``all``, ``outside`` and the six edge keys.  ``all``
fills ``outside``/``horizontal``/``vertical``; ``outside`` fills the four
outer edges.  Keys given explicitly are never overwritten by expansion.
Each edge is a style name or a ``{style, color, width}`` mapping.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .backend import BorderTarget
from .constants import ConstantTable

logger = logging.getLogger(__name__)

EDGES = ("left", "right", "top", "bottom", "horizontal", "vertical")
OUTSIDE_EDGES = ("left", "right", "top", "bottom")
_SHORTHANDS = ("all", "outside")

DEFAULT_STYLE = "single"
DEFAULT_COLOR = "auto"
DEFAULT_WIDTH = "0.5pt"


@dataclass(frozen=True)
class EdgeBorder:
    style: str = DEFAULT_STYLE
    color: str = DEFAULT_COLOR
    width: str = DEFAULT_WIDTH


def _normalize_edge(value: Any) -> EdgeBorder:
    if isinstance(value, Mapping):
        return EdgeBorder(
            style=value.get("style") or DEFAULT_STYLE,
            color=value.get("color") or DEFAULT_COLOR,
            width=value.get("width") or DEFAULT_WIDTH,
        )
    return EdgeBorder(style=str(value))


def expand_border(spec: Any) -> dict[str, EdgeBorder]:
    """Resolve a border spec into one :class:`EdgeBorder` per affected edge."""
    if not spec:
        return {}
    spec = {"all": spec} if not isinstance(spec, Mapping) else dict(spec)

    if spec.get("all"):
        for key in ("outside", "horizontal", "vertical"):
            if not spec.get(key):
                spec[key] = spec["all"]
    if spec.get("outside"):
        for key in OUTSIDE_EDGES:
            if not spec.get(key):
                spec[key] = spec["outside"]

    return {edge: _normalize_edge(spec[edge]) for edge in EDGES if spec.get(edge)}


def border_spec_from_parameters(parameters: Mapping[str, Any]) -> Any:
    """Collect ``border`` and ``border-<edge>`` parameters into one spec.

    Returns ``None`` when the node has no border parameters at all.
    """
    base = parameters.get("border")
    per_edge = {}
    for key, value in parameters.items():
        if not key.startswith("border-") or not value:
            continue
        edge = key[len("border-"):]
        if edge in EDGES or edge in _SHORTHANDS:
            per_edge[edge] = value
        else:
            logger.warning("Ignoring unknown border parameter %r", key)

    if not per_edge:
        return base or None
    if isinstance(base, Mapping):
        merged = dict(base)
    elif base:
        merged = {"all": base}
    else:
        merged = {}
    merged.update(per_edge)
    return merged


def apply_border(target: BorderTarget, spec: Any, constants: ConstantTable) -> None:
    """Set every edge described by *spec* on *target*.

    Width and color are only set on edges whose style is not "none";
    hosts reject them on a missing line.  Every edge is resolved before
    the first one is set, so an unknown constant leaves *target* untouched.
    """
    edges = expand_border(spec)
    if not edges:
        return
    none_style = constants.none_line_style
    resolved = []
    for edge, border in edges.items():
        edge_id = constants.resolve(edge, "border")
        style = constants.resolve(border.style, "linestyle")
        if style == none_style:
            resolved.append((edge_id, style, None, None))
            continue
        resolved.append((
            edge_id,
            style,
            constants.resolve(border.color, "color"),
            constants.resolve(border.width, "linewidth"),
        ))

    for edge_id, style, color, width in resolved:
        if color is None and width is None:
            target.set_border(edge_id, style)
        else:
            target.set_border(edge_id, style, color=color, width=width)
