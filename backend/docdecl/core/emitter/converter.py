"""Tree-walking emitter: realizes a declarative node tree as a Word document.

Emission happens in two phases.  ``prepare`` walks the whole tree once,
resolving every node's style (and, in strict mode, validating structure)
before the backend is touched.  The emit phase then walks the tree again,
depth-first in declared order, dispatching on node kind.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from docdecl.core.errors import FileAccessDenied, MalformedStructure
from docdecl.core.nodes import TEXT_BEARING_KINDS, Node, NodeKind

from .backend import DocumentBackend, DocumentHandle
from .constants import ConstantTable
from .context import SelectionContext
from .style import StyleDelta, resolve_style
from .table_builder import TableBuilder, check_table_structure

logger = logging.getLogger(__name__)

# Kinds whose parameters carry a style
_STYLED_KINDS = TEXT_BEARING_KINDS | {NodeKind.ROW, NodeKind.COLUMN}


@dataclass
class CodeScope:
    """What an embedded ``code`` node's action gets to work with."""
    session: DocumentBackend
    document: DocumentHandle
    selection: SelectionContext
    constants: ConstantTable
    node: Node


class DocumentEmitter:
    """Emits document trees against one backend session."""

    def __init__(
        self,
        backend: DocumentBackend,
        *,
        strict_structure: bool | None = None,
        keep_open: bool | None = None,
        output_dir: str | Path | None = None,
    ):
        from docdecl.config import settings

        self.backend = backend
        self.constants = ConstantTable(backend.load_constant)
        self.strict_structure = (
            settings.STRICT_STRUCTURE if strict_structure is None else strict_structure
        )
        self.keep_open = settings.KEEP_OPEN if keep_open is None else keep_open
        self.output_dir = Path(output_dir) if output_dir is not None else settings.output_path

        self.context: SelectionContext | None = None
        # Keyed by id(); _prepared keeps those nodes alive
        self._styles: dict[int, StyleDelta] = {}
        self._prepared: list[Node] = []

    # ── Public API ────────────────────────────────────────────────────

    def emit(self, tree: Node) -> DocumentHandle:
        """Emit the first ``document`` node in *tree* and return its handle."""
        document = tree.find(NodeKind.DOCUMENT)
        if document is None:
            raise MalformedStructure("Tree contains no document node")
        self._styles.clear()
        self._prepared.clear()
        self.prepare(document)
        return self._emit_document(document)

    def prepare(self, tree: Node) -> None:
        """Resolve styles for every node in *tree*; validate if strict."""
        self._prepared.append(tree)
        self._prepare_node(tree, parent=None)

    def emit_node(self, node: Node) -> Any:
        handler = self._HANDLERS[node.kind]
        logger.debug("Emitting %s node (depth %d)", node.kind.value,
                     self.context.depth if self.context else 0)
        return handler(self, node)

    def emit_cell(self, node: Node) -> None:
        """Emit a table cell's content; the table builder has selected the cell."""
        self._emit_text_bearing(node)

    def add_content(self, node: Node, text: str) -> None:
        """Type *text* for *node*; cells route it through table-aware insertion."""
        if node.kind == NodeKind.CELL:
            self.context.type_into_cell(text)
        else:
            self.context.type_text(text)

    def style_of(self, node: Node) -> StyleDelta:
        try:
            return self._styles[id(node)]
        except KeyError:
            delta = self._styles[id(node)] = resolve_style(node.parameters, self.constants)
            return delta

    def misplaced(self, node: Node, reason: str) -> None:
        """Skip structure the emitter cannot place, or reject it when strict."""
        if self.strict_structure:
            raise MalformedStructure(reason)
        logger.warning("Skipping %s node: %s", node.kind.value, reason)

    # ── Prepare phase ─────────────────────────────────────────────────

    def _prepare_node(self, node: Node, parent: Node | None) -> None:
        if node.kind in _STYLED_KINDS:
            self.style_of(node)
        if self.strict_structure:
            self._validate(node, parent)
        for child in node.children:
            self._prepare_node(child, node)

    def _validate(self, node: Node, parent: Node | None) -> None:
        parent_kind = parent.kind if parent is not None else None
        if node.kind in (NodeKind.ROW, NodeKind.COLUMN) and parent_kind != NodeKind.TABLE:
            raise MalformedStructure(f"'{node.kind.value}' node outside a table")
        if node.kind == NodeKind.CELL and parent_kind != NodeKind.ROW:
            raise MalformedStructure("'cell' node outside a row")
        if node.kind == NodeKind.TABLE:
            check_table_structure(node)
        for child in node.misplaced_children():
            if node.kind not in (NodeKind.TABLE, NodeKind.ROW):
                raise MalformedStructure(
                    f"'{child.kind.value}' node cannot appear inside '{node.kind.value}'"
                )

    # ── Node kinds ────────────────────────────────────────────────────

    def _emit_document(self, node: Node) -> DocumentHandle:
        active = bool(node.parameter("active"))
        keep_open = self.keep_open or node.parameter("keepopen")
        if node.parameter("visible"):
            logger.debug("'visible' only affects the host window; document is still saved")
        path: Path | None = None

        if active:
            document = self.backend.attach_active_document()
            logger.info("Attached to active document %s", document.name)
        else:
            force_new = bool(node.parameter("new"))
            if node.label:
                path = self._resolve_path(node.label)
                if path.is_file() and not force_new and not os.access(path, os.R_OK):
                    raise FileAccessDenied(path)
            document = self.backend.open_or_create_document(path, force_new=force_new)
            logger.info("Opened document %s", path or "(untitled)")

        outer = self.context
        self.context = SelectionContext(document)
        try:
            for child in node.nodes():
                self.emit_node(child)
        finally:
            self.context = outer

        if not active and not keep_open and path is not None:
            document.save_as(path)
            logger.info("Saved document to %s", path)
        return document

    def _emit_text_bearing(self, node: Node) -> None:
        with self.context.styled(self.style_of(node)):
            if node.kind != NodeKind.FORMATTING:
                text = node.label if node.label else node.body
                if text:
                    self.add_content(node, text)
            for child in node.nodes():
                self.emit_node(child)
            if node.kind == NodeKind.PARA:
                self.context.type_paragraph_break()

    def _emit_table(self, node: Node) -> Any:
        for child in node.misplaced_children():
            self.misplaced(child, "not a row or column of its table")
        return TableBuilder(self).build(node)

    def _emit_table_part(self, node: Node) -> None:
        self.misplaced(node, "only valid inside a table")

    def _emit_code(self, node: Node) -> Any:
        action = node.parameter("action")
        if not callable(action):
            logger.warning("Code node without a callable action; skipped")
            return None
        scope = CodeScope(
            session=self.backend,
            document=self.context.document,
            selection=self.context,
            constants=self.constants,
            node=node,
        )
        return action(scope)

    def _resolve_path(self, label: str) -> Path:
        path = Path(label).expanduser()
        if not path.is_absolute():
            path = self.output_dir / path
        return path.resolve()

    _HANDLERS: dict[NodeKind, Callable[["DocumentEmitter", Node], Any]] = {
        NodeKind.DOCUMENT: _emit_document,
        NodeKind.TEXT: _emit_text_bearing,
        NodeKind.PARA: _emit_text_bearing,
        NodeKind.FORMATTING: _emit_text_bearing,
        NodeKind.TABLE: _emit_table,
        NodeKind.ROW: _emit_table_part,
        NodeKind.COLUMN: _emit_table_part,
        NodeKind.CELL: _emit_table_part,
        NodeKind.CODE: _emit_code,
    }


_missing = set(NodeKind) - set(DocumentEmitter._HANDLERS)
if _missing:
    raise RuntimeError(f"No emitter handler for node kinds: {sorted(k.value for k in _missing)}")
