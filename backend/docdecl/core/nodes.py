"""Declarative node tree consumed by the emitter.

A tree is produced by a tree builder (see ``tree_loader``) and is never
mutated during emission.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator


class NodeKind(str, Enum):
    DOCUMENT = "document"
    TEXT = "text"
    FORMATTING = "formatting"
    PARA = "para"
    TABLE = "table"
    ROW = "row"
    CELL = "cell"
    COLUMN = "column"
    CODE = "code"


# Kinds that type text and carry a style scope
TEXT_BEARING_KINDS = frozenset({
    NodeKind.TEXT, NodeKind.PARA, NodeKind.FORMATTING, NodeKind.CELL,
})

# Children each structural kind is allowed to hold; None means any kind
CHILD_CONTRACT: dict[NodeKind, frozenset[NodeKind] | None] = {
    NodeKind.DOCUMENT: None,
    NodeKind.TEXT: None,
    NodeKind.FORMATTING: None,
    NodeKind.PARA: None,
    NodeKind.CELL: None,
    NodeKind.TABLE: frozenset({NodeKind.ROW, NodeKind.COLUMN}),
    NodeKind.ROW: frozenset({NodeKind.CELL}),
    NodeKind.COLUMN: frozenset(),
    NodeKind.CODE: frozenset(),
}


@dataclass(frozen=True)
class Node:
    """One element of the declarative tree: tag, label, body, parameters, children."""
    kind: NodeKind
    label: str | None = None
    body: str | None = None
    parameters: dict[str, Any] = field(default_factory=dict)
    children: tuple["Node", ...] = ()

    def is_(self, kind: NodeKind | str) -> bool:
        return self.kind == NodeKind(kind)

    def parameter(self, name: str, default: Any = None) -> Any:
        return self.parameters.get(name, default)

    def nodes(self, kind: NodeKind | str | None = None) -> Iterator["Node"]:
        """Iterate children in declared order, optionally filtered by kind."""
        if kind is None:
            yield from self.children
            return
        wanted = NodeKind(kind)
        for child in self.children:
            if child.kind == wanted:
                yield child

    def find(self, kind: NodeKind | str) -> "Node | None":
        """Depth-first search for the first node of *kind*, self included."""
        if self.is_(kind):
            return self
        for child in self.children:
            found = child.find(kind)
            if found is not None:
                return found
        return None

    def misplaced_children(self) -> list["Node"]:
        """Children this node's kind does not consume."""
        allowed = CHILD_CONTRACT[self.kind]
        if allowed is None:
            return []
        return [c for c in self.children if c.kind not in allowed]
