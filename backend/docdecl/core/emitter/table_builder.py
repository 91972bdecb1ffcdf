"""Table builder for declarative ``table`` nodes.

The table is sized before anything is typed: rows are the table's ``row``
children, columns are the ``cell`` children of the *first* row only.
Later rows with more cells have the excess skipped; rows with fewer
cells leave the remaining host cells untouched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from docdecl.core.errors import MalformedStructure
from docdecl.core.nodes import Node, NodeKind

from .backend import TableHandle
from .borders import apply_border, border_spec_from_parameters

if TYPE_CHECKING:
    from .converter import DocumentEmitter

logger = logging.getLogger(__name__)

POINTS_PER_INCH = 72


@dataclass(frozen=True)
class TableLayout:
    rows: int
    columns: int

    @property
    def is_empty(self) -> bool:
        return self.rows == 0 or self.columns == 0


def plan_table(node: Node) -> TableLayout:
    """Count rows, and the cells of the first row."""
    rows = 0
    columns = 0
    for child in node.nodes(NodeKind.ROW):
        rows += 1
        if rows == 1:
            columns = sum(1 for _ in child.nodes(NodeKind.CELL))
    return TableLayout(rows=rows, columns=columns)


_WIDTH_RE = re.compile(r"^\s*(\d+(?:\.\d+)?|\.\d+)\s*(pt|in)?\s*$", re.IGNORECASE)


def parse_width(value: Any) -> float | None:
    """Parse a column width like ``72``, ``'90pt'`` or ``'1.5in'`` into points."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    m = _WIDTH_RE.match(str(value))
    if not m:
        return None
    points = float(m.group(1))
    if (m.group(2) or "pt").lower() == "in":
        points *= POINTS_PER_INCH
    return points


class TableBuilder:
    """Creates one host table for a ``table`` node and fills it."""

    def __init__(self, emitter: "DocumentEmitter"):
        self.emitter = emitter
        self.context = emitter.context
        self.constants = emitter.constants

    def build(self, node: Node) -> TableHandle | None:
        layout = plan_table(node)
        if layout.is_empty:
            self.emitter.misplaced(node, f"table has no cells ({layout.rows}x{layout.columns})")
            return None

        table = self.context.document.create_table(self.context.range, layout.rows, layout.columns)
        logger.info("Created %dx%d table", layout.rows, layout.columns)

        apply_border(table, border_spec_from_parameters(node.parameters), self.constants)
        self._format_columns(node, table, layout)
        self._fill_rows(node, table, layout)

        # Leave the insertion point right after the table
        self.context.select(table)
        self.context.collapse_selection_to_end()
        return table

    def _format_columns(self, node: Node, table: TableHandle, layout: TableLayout) -> None:
        for index, column_node in enumerate(node.nodes(NodeKind.COLUMN), start=1):
            if index > layout.columns:
                self.emitter.misplaced(column_node, f"column {index} beyond {layout.columns} table columns")
                break
            column = table.column(index)
            self.context.select(column)
            self.context.apply_style(self.emitter.style_of(column_node))

            width = column_node.parameter("width")
            if width:
                points = parse_width(width)
                if points is None:
                    logger.warning("Ignoring unparseable column width %r", width)
                    continue
                column.set_preferred_width(points, self.constants.resolve("wdPreferredWidthPoints"))

    def _fill_rows(self, node: Node, table: TableHandle, layout: TableLayout) -> None:
        for r, row_node in enumerate(node.nodes(NodeKind.ROW), start=1):
            row = table.row(r)
            self.context.select(row)
            self.context.apply_style(self.emitter.style_of(row_node))
            apply_border(row, border_spec_from_parameters(row_node.parameters), self.constants)

            for c, cell_node in enumerate(row_node.nodes(NodeKind.CELL), start=1):
                if c > layout.columns:
                    logger.debug("Row %d: skipping cells beyond column %d", r, layout.columns)
                    break
                cell = table.cell(r, c)
                self.context.select(cell)
                self.context.apply_style(self.emitter.style_of(cell_node))
                apply_border(cell, border_spec_from_parameters(cell_node.parameters), self.constants)
                self.context.select(cell.content)
                self.emitter.emit_cell(cell_node)


def check_table_structure(node: Node) -> None:
    """Raise ``MalformedStructure`` for children a table cannot place."""
    for child in node.misplaced_children():
        raise MalformedStructure(f"'{child.kind.value}' node cannot appear inside a table")
    for row in node.nodes(NodeKind.ROW):
        for child in row.misplaced_children():
            raise MalformedStructure(f"'{child.kind.value}' node cannot appear inside a row")
    layout = plan_table(node)
    if layout.is_empty:
        raise MalformedStructure("table has no rows or no cells in its first row")
    columns = sum(1 for _ in node.nodes(NodeKind.COLUMN))
    if columns > layout.columns:
        raise MalformedStructure(
            f"table declares {columns} columns but its first row has {layout.columns} cells"
        )
