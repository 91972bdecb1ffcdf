"""python-docx backend for the emitter.

Models Word's automation surface on top of python-docx: a selection that
is either an insertion point (a paragraph inside a story, i.e. the body or
a table cell) or a selected table range, a Word-style constant space, and
tables whose ranges accept borders and formatting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from docx import Document
from docx.enum.text import WD_PARAGRAPH_ALIGNMENT
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt
from docx.table import Table, _Cell
from docx.text.paragraph import Paragraph

from docdecl.core.errors import BackendUnavailable, MalformedStructure, UnknownConstant

from .backend import (
    CellHandle,
    ColumnHandle,
    DocumentBackend,
    DocumentHandle,
    RangeHandle,
    SelectionHandle,
    TableHandle,
)
from .style import StyleAxis

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constant space
# ---------------------------------------------------------------------------

WORD_CONSTANTS: dict[str, Any] = {
    # Line styles → w:val of a border element
    "wdLineStyleNone": "none",
    "wdLineStyleSingle": "single",
    "wdLineStyleDot": "dotted",
    "wdLineStyleDashSmallGap": "dashSmallGap",
    "wdLineStyleDashLargeGap": "dashed",
    "wdLineStyleDashDot": "dotDash",
    "wdLineStyleDashDotDot": "dotDotDash",
    "wdLineStyleDouble": "double",
    "wdLineStyleTriple": "triple",
    "wdLineStyleThinThickSmallGap": "thinThickSmallGap",
    "wdLineStyleThickThinSmallGap": "thickThinSmallGap",
    "wdLineStyleSingleWavy": "wave",
    "wdLineStyleDoubleWavy": "doubleWave",
    "wdLineStyleEmboss3D": "threeDEmboss",
    "wdLineStyleEngrave3D": "threeDEngrave",
    "wdLineStyleOutset": "outset",
    "wdLineStyleInset": "inset",
    # Line widths → w:sz, in eighths of a point
    "wdLineWidth025pt": 2,
    "wdLineWidth050pt": 4,
    "wdLineWidth075pt": 6,
    "wdLineWidth100pt": 8,
    "wdLineWidth150pt": 12,
    "wdLineWidth225pt": 18,
    "wdLineWidth300pt": 24,
    "wdLineWidth450pt": 36,
    "wdLineWidth600pt": 48,
    # Colors → w:color
    "wdColorAutomatic": "auto",
    "wdColorBlack": "000000",
    "wdColorWhite": "FFFFFF",
    "wdColorRed": "FF0000",
    "wdColorGreen": "008000",
    "wdColorBlue": "0000FF",
    "wdColorYellow": "FFFF00",
    "wdColorGray50": "808080",
    # Border identifiers → border element names
    "wdBorderTop": "top",
    "wdBorderLeft": "left",
    "wdBorderBottom": "bottom",
    "wdBorderRight": "right",
    "wdBorderHorizontal": "insideH",
    "wdBorderVertical": "insideV",
    # Paragraph alignment
    "wdAlignParagraphLeft": WD_PARAGRAPH_ALIGNMENT.LEFT,
    "wdAlignParagraphCenter": WD_PARAGRAPH_ALIGNMENT.CENTER,
    "wdAlignParagraphRight": WD_PARAGRAPH_ALIGNMENT.RIGHT,
    "wdAlignParagraphJustify": WD_PARAGRAPH_ALIGNMENT.JUSTIFY,
    "wdAlignParagraphDistribute": WD_PARAGRAPH_ALIGNMENT.DISTRIBUTE,
    # Preferred width types → w:tcW/@w:type
    "wdPreferredWidthAuto": "auto",
    "wdPreferredWidthPoints": "dxa",
    "wdPreferredWidthPercent": "pct",
    # Collapse directions
    "wdCollapseEnd": 0,
    "wdCollapseStart": 1,
}

_FONT_AXES = (StyleAxis.BOLD, StyleAxis.ITALIC, StyleAxis.FONT, StyleAxis.SIZE)


# ---------------------------------------------------------------------------
# OOXML helpers
# ---------------------------------------------------------------------------

_TBLPR_ORDER = (
    "tblStyle", "tblpPr", "tblOverlap", "bidiVisual", "tblStyleRowBandSize",
    "tblStyleColBandSize", "tblW", "jc", "tblCellSpacing", "tblInd",
    "tblBorders", "shd", "tblLayout", "tblCellMar", "tblLook",
    "tblCaption", "tblDescription",
)
_TCPR_ORDER = (
    "cnfStyle", "tcW", "gridSpan", "hMerge", "vMerge", "tcBorders", "shd",
    "noWrap", "tcMar", "textDirection", "tcFitText", "vAlign", "hideMark",
)
_BORDER_ORDER = (
    "top", "left", "start", "bottom", "right", "end",
    "insideH", "insideV", "tl2br", "tr2bl",
)


def _insert_ordered(parent, child, order: tuple[str, ...]) -> None:
    """Insert *child* before the first sibling that the schema puts after it."""
    local = child.tag.split("}")[-1]
    later = {qn(f"w:{name}") for name in order[order.index(local) + 1:]}
    for existing in parent:
        if existing.tag in later:
            existing.addprevious(child)
            return
    parent.append(child)


def _get_or_add(parent, name: str, order: tuple[str, ...]):
    el = parent.find(qn(f"w:{name}"))
    if el is None:
        el = OxmlElement(f"w:{name}")
        _insert_ordered(parent, el, order)
    return el


def _set_border_edge(borders, edge: str, style: str, color=None, width=None) -> None:
    el = borders.find(qn(f"w:{edge}"))
    if el is None:
        el = OxmlElement(f"w:{edge}")
        _insert_ordered(borders, el, _BORDER_ORDER)
    el.set(qn("w:val"), style)
    el.set(qn("w:space"), "0")
    if width is not None:
        el.set(qn("w:sz"), str(width))
    if color is not None:
        el.set(qn("w:color"), color)


def _to_points(size: Any) -> float:
    text = str(size).strip().lower()
    if text.endswith("pt"):
        text = text[:-2]
    return float(text)


def _apply_font(run, axis: StyleAxis, value: Any) -> None:
    if axis == StyleAxis.BOLD:
        run.bold = value
    elif axis == StyleAxis.ITALIC:
        run.italic = value
    elif axis == StyleAxis.FONT:
        run.font.name = value
    elif axis == StyleAxis.SIZE:
        run.font.size = Pt(_to_points(value)) if value is not None else None


def _is_empty(paragraph: Paragraph) -> bool:
    return not paragraph.runs and not paragraph.text


# ---------------------------------------------------------------------------
# Insertion points and table ranges
# ---------------------------------------------------------------------------

@dataclass
class DocxInsertionPoint:
    """A position in a story; ``paragraph`` is None until something is typed."""
    story: Any
    paragraph: Paragraph | None = None
    table: "DocxTable | None" = None
    coord: tuple[int, int] | None = None

    @property
    def cell_style(self) -> dict[StyleAxis, Any] | None:
        if self.table is None or self.coord is None:
            return None
        return self.table.cell_styles[self.coord]


class DocxCellCollection:
    """1-based collection of python-docx cells."""

    def __init__(self, table: "DocxTable | None", coords: list[tuple[int, int]]):
        self._table = table
        self._coords = coords

    @property
    def count(self) -> int:
        return len(self._coords)

    def item(self, index: int) -> _Cell:
        r, c = self._coords[index - 1]
        return self._table.docx_cell(r, c)


class DocxCellRange(RangeHandle):
    """A rectangular block of cells: a row, a column, a cell or the whole table."""

    def __init__(self, table: "DocxTable", coords: list[tuple[int, int]]):
        self.table = table
        self.coords = coords

    @property
    def cells(self) -> DocxCellCollection:
        return DocxCellCollection(self.table, self.coords)

    def get_style(self, axis: StyleAxis) -> Any:
        r, c = self.coords[0]
        if axis == StyleAxis.ALIGN:
            return self.table.docx_cell(r, c).paragraphs[0].alignment
        return self.table.cell_styles[(r, c)].get(axis)

    def set_style(self, axis: StyleAxis, value: Any) -> None:
        for r, c in self.coords:
            cell = self.table.docx_cell(r, c)
            if axis == StyleAxis.ALIGN:
                for paragraph in cell.paragraphs:
                    paragraph.alignment = value
                continue
            self.table.cell_styles[(r, c)][axis] = value
            for paragraph in cell.paragraphs:
                for run in paragraph.runs:
                    _apply_font(run, axis, value)

    def set_border(self, edge: Any, style: Any, color: Any = None, width: Any = None) -> None:
        rows = [r for r, _ in self.coords]
        cols = [c for _, c in self.coords]
        first_row, last_row = min(rows), max(rows)
        first_col, last_col = min(cols), max(cols)

        for r, c in self.coords:
            if edge == "top":
                hit, cell_edge = r == first_row, "top"
            elif edge == "bottom":
                hit, cell_edge = r == last_row, "bottom"
            elif edge == "left":
                hit, cell_edge = c == first_col, "left"
            elif edge == "right":
                hit, cell_edge = c == last_col, "right"
            elif edge == "insideH":
                hit, cell_edge = r != last_row, "bottom"
            elif edge == "insideV":
                hit, cell_edge = c != last_col, "right"
            else:
                raise ValueError(f"Unknown border edge: {edge}")
            if not hit:
                continue
            tcPr = self.table.docx_cell(r, c)._tc.get_or_add_tcPr()
            borders = _get_or_add(tcPr, "tcBorders", _TCPR_ORDER)
            _set_border_edge(borders, cell_edge, style, color, width)

    def start_point(self) -> DocxInsertionPoint:
        return self.table.cell(*self.coords[0]).content

    def end_point(self) -> DocxInsertionPoint:
        return self.table.cell(*self.coords[-1]).content


class DocxColumn(DocxCellRange, ColumnHandle):
    def set_preferred_width(self, width: float, width_type: Any) -> None:
        twips = int(round(width * 20))
        for r, c in self.coords:
            tcPr = self.table.docx_cell(r, c)._tc.get_or_add_tcPr()
            tcW = _get_or_add(tcPr, "tcW", _TCPR_ORDER)
            tcW.set(qn("w:w"), str(twips))
            tcW.set(qn("w:type"), width_type)
        if width_type == "dxa":
            _, c = self.coords[0]
            self.table.table.columns[c - 1].width = Pt(width)


class DocxCell(DocxCellRange, CellHandle):
    @property
    def content(self) -> DocxInsertionPoint:
        r, c = self.coords[0]
        cell = self.table.docx_cell(r, c)
        return DocxInsertionPoint(
            story=cell, paragraph=cell.paragraphs[-1], table=self.table, coord=(r, c),
        )


class DocxTable(TableHandle):
    """A python-docx table plus the per-cell formatting typed text inherits."""

    def __init__(self, table: Table, after_point: DocxInsertionPoint, ambient: dict[StyleAxis, Any]):
        self.table = table
        self.after_point = after_point
        self.ambient = ambient
        self.cell_styles: dict[tuple[int, int], dict[StyleAxis, Any]] = {
            (r, c): {axis: ambient.get(axis) for axis in _FONT_AXES}
            for r in range(1, self.row_count + 1)
            for c in range(1, self.column_count + 1)
        }
        self._all = DocxCellRange(self, sorted(self.cell_styles))
        align = ambient.get(StyleAxis.ALIGN)
        if align is not None:
            self._all.set_style(StyleAxis.ALIGN, align)

    @property
    def row_count(self) -> int:
        return len(self.table.rows)

    @property
    def column_count(self) -> int:
        return len(self.table.columns)

    @property
    def cells(self) -> DocxCellCollection:
        return self._all.cells

    def docx_cell(self, row: int, column: int) -> _Cell:
        return self.table.cell(row - 1, column - 1)

    def column(self, index: int) -> DocxColumn:
        return DocxColumn(self, [(r, index) for r in range(1, self.row_count + 1)])

    def row(self, index: int) -> DocxCellRange:
        return DocxCellRange(self, [(index, c) for c in range(1, self.column_count + 1)])

    def cell(self, row: int, column: int) -> DocxCell:
        return DocxCell(self, [(row, column)])

    def get_style(self, axis: StyleAxis) -> Any:
        return self._all.get_style(axis)

    def set_style(self, axis: StyleAxis, value: Any) -> None:
        self._all.set_style(axis, value)

    def set_border(self, edge: Any, style: Any, color: Any = None, width: Any = None) -> None:
        borders = _get_or_add(self.table._tbl.tblPr, "tblBorders", _TBLPR_ORDER)
        _set_border_edge(borders, edge, style, color, width)

    def start_point(self) -> DocxInsertionPoint:
        return self._all.start_point()

    def end_point(self) -> DocxInsertionPoint:
        return self.after_point


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

class DocxSelection(SelectionHandle):
    """Word-like selection over a python-docx document.

    Character formatting (bold/italic/font/size) is held by the selection
    and given to every run it types; alignment is written through to the
    current paragraph and inherited by paragraphs created after it.
    """

    def __init__(self, document):
        self._point = DocxInsertionPoint(story=document)
        self._range: DocxCellRange | DocxTable | None = None
        self._font: dict[StyleAxis, Any] = {axis: None for axis in _FONT_AXES}
        self._align = None

        # The final empty paragraph of a document is where typing continues
        paragraphs = document.paragraphs
        body = document.element.body
        if paragraphs and _is_empty(paragraphs[-1]):
            blocks = [el for el in body if el.tag in (qn("w:p"), qn("w:tbl"))]
            if blocks and blocks[-1] is paragraphs[-1]._p:
                self._point.paragraph = paragraphs[-1]
                self._align = paragraphs[-1].alignment

    # -- State ---------------------------------------------------------------

    def snapshot(self) -> dict[StyleAxis, Any]:
        state = dict(self._font)
        state[StyleAxis.ALIGN] = self._align
        return state

    def _load(self, point: DocxInsertionPoint, state: dict[StyleAxis, Any] | None = None) -> None:
        self._range = None
        self._point = point
        if state is None:
            state = point.cell_style
        if state is not None:
            self._font = {axis: state.get(axis) for axis in _FONT_AXES}
            if StyleAxis.ALIGN in state:
                self._align = state[StyleAxis.ALIGN]
        if point.paragraph is not None:
            if state is not None and StyleAxis.ALIGN in state:
                point.paragraph.alignment = self._align
            else:
                self._align = point.paragraph.alignment

    def _ensure_point(self) -> DocxInsertionPoint:
        if self._range is not None:
            self._load(self._range.start_point())
        return self._point

    def _current_paragraph(self) -> Paragraph:
        point = self._ensure_point()
        if point.paragraph is None:
            point.paragraph = point.story.add_paragraph()
            point.paragraph.alignment = self._align
        return point.paragraph

    @property
    def range(self) -> DocxInsertionPoint:
        return self._ensure_point()

    @property
    def cells(self) -> DocxCellCollection:
        if self._range is not None:
            return self._range.cells
        point = self._point
        if point.table is not None and point.coord is not None:
            return DocxCellCollection(point.table, [point.coord])
        return DocxCellCollection(None, [])

    @property
    def in_cell(self) -> bool:
        return self._range is None and isinstance(self._point.story, _Cell)

    # -- Style ---------------------------------------------------------------

    def get_style(self, axis: StyleAxis) -> Any:
        if self._range is not None:
            return self._range.get_style(axis)
        if axis == StyleAxis.ALIGN:
            return self._align
        return self._font[axis]

    def set_style(self, axis: StyleAxis, value: Any) -> None:
        if self._range is not None:
            self._range.set_style(axis, value)
        elif axis == StyleAxis.ALIGN:
            self._align = value
            if self._point.paragraph is not None:
                self._point.paragraph.alignment = value
        else:
            self._font[axis] = value

    # -- Typing --------------------------------------------------------------

    def type_text(self, text: str) -> None:
        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        for i, line in enumerate(lines):
            if i:
                self.type_paragraph_break()
            if not line:
                continue
            run = self._current_paragraph().add_run(line)
            for axis in _FONT_AXES:
                if self._font[axis] is not None:
                    _apply_font(run, axis, self._font[axis])

    def type_paragraph_break(self) -> None:
        current = self._current_paragraph()
        new = self._point.story.add_paragraph()
        current._p.addnext(new._p)
        new.alignment = self._align
        self._point.paragraph = new

    def type_into_cell(self, text: str) -> None:
        self._ensure_point()
        if not self.in_cell:
            raise MalformedStructure("Cell content typed outside a table cell")
        self.type_text(text)

    # -- Positioning ---------------------------------------------------------

    def select(self, target: Any) -> None:
        if isinstance(target, DocxInsertionPoint):
            self._load(target)
        elif isinstance(target, (DocxCellRange, DocxTable)):
            self._range = target
        else:
            raise TypeError(f"Cannot select {type(target).__name__}")

    def collapse_to_end(self) -> None:
        if isinstance(self._range, DocxTable):
            self._load(self._range.after_point, self._range.ambient)
        elif self._range is not None:
            self._load(self._range.end_point())


# ---------------------------------------------------------------------------
# Document and session
# ---------------------------------------------------------------------------

class DocxDocument(DocumentHandle):
    def __init__(self, document, name: str = ""):
        self.document = document
        self.name = name
        self._selection = DocxSelection(document)

    @property
    def selection(self) -> DocxSelection:
        return self._selection

    def create_table(self, anchor: DocxInsertionPoint, rows: int, columns: int) -> DocxTable:
        story = anchor.story
        table = story.add_table(rows, columns)
        tbl = table._tbl

        if isinstance(story, _Cell):
            # _Cell.add_table appends its own trailing paragraph
            trailing = tbl.getnext()
            if trailing is not None and trailing.tag == qn("w:p"):
                trailing.getparent().remove(trailing)

        after_paragraph = None
        if anchor.paragraph is not None:
            if _is_empty(anchor.paragraph):
                anchor.paragraph._p.addprevious(tbl)
                after_paragraph = anchor.paragraph
            else:
                anchor.paragraph._p.addnext(tbl)

        if after_paragraph is None:
            nxt = tbl.getnext()
            if nxt is not None and nxt.tag == qn("w:p"):
                after_paragraph = Paragraph(nxt, story)
            else:
                after_paragraph = story.add_paragraph()
                tbl.addnext(after_paragraph._p)

        after = DocxInsertionPoint(
            story=story, paragraph=after_paragraph, table=anchor.table, coord=anchor.coord,
        )
        return DocxTable(table, after, self._selection.snapshot())

    def save_as(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.document.save(str(path))


class DocxBackend(DocumentBackend):
    """A python-docx session.

    *active_document* plays the part of the document already open in the
    user's Word session; ``document (active)`` nodes attach to it.
    """

    def __init__(self, active_document=None, constants: dict[str, Any] | None = None):
        self._active = active_document
        self._constants = dict(WORD_CONSTANTS) if constants is None else constants

    def load_constant(self, name: str) -> Any:
        try:
            return self._constants[name]
        except KeyError:
            raise UnknownConstant(name) from None

    def open_or_create_document(self, path: Path | None = None, force_new: bool = False) -> DocxDocument:
        name = Path(path).name if path is not None else ""
        try:
            if path is not None and Path(path).is_file() and not force_new:
                logger.debug("Opening existing document %s", path)
                return DocxDocument(Document(str(path)), name=name)
            return DocxDocument(Document(), name=name)
        except (PackageNotFoundError, OSError, KeyError, ValueError) as e:
            raise BackendUnavailable(f"Could not add Word document {path}: {e}") from e

    def attach_active_document(self) -> DocxDocument:
        if self._active is None:
            raise BackendUnavailable("No active document in this session")
        return DocxDocument(self._active, name="active")
