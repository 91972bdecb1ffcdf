"""Recording in-memory backend for emitter tests.

Every backend call lands in one shared ``log`` list as a tuple, so tests
can assert on the exact order of host operations.
"""

from pathlib import Path

from docdecl.core.emitter.backend import (
    CellHandle,
    ColumnHandle,
    DocumentBackend,
    DocumentHandle,
    RangeHandle,
    SelectionHandle,
    TableHandle,
)
from docdecl.core.emitter.constants import ALIASES
from docdecl.core.errors import BackendUnavailable, MalformedStructure, UnknownConstant

KNOWN_CONSTANTS = {
    name for namespace in ALIASES.values() for name in namespace.values()
} | {"wdPreferredWidthPoints"}


class FakeCells:
    def __init__(self, names):
        self.names = list(names)

    @property
    def count(self):
        return len(self.names)

    def item(self, index):
        return self.names[index - 1]


class FakeRange(RangeHandle):
    def __init__(self, log, name, cell_names=()):
        self.log = log
        self.name = name
        self.style = {}
        self.cell_names = list(cell_names)

    @property
    def cells(self):
        return FakeCells(self.cell_names)

    def set_border(self, edge, style, color=None, width=None):
        self.log.append(("border", self.name, edge, style, color, width))


class FakeColumn(FakeRange, ColumnHandle):
    def set_preferred_width(self, width, width_type):
        self.log.append(("width", self.name, width, width_type))


class FakeCell(FakeRange, CellHandle):
    @property
    def content(self):
        return f"in {self.name}"


class FakeTable(FakeRange, TableHandle):
    def __init__(self, log, rows, columns):
        names = [f"cell({r},{c})" for r in range(1, rows + 1) for c in range(1, columns + 1)]
        super().__init__(log, "table", names)
        self.rows = rows
        self.columns = columns
        self._parts = {}

    @property
    def row_count(self):
        return self.rows

    @property
    def column_count(self):
        return self.columns

    def _part(self, cls, name):
        if name not in self._parts:
            self._parts[name] = cls(self.log, name, [name])
        return self._parts[name]

    def column(self, index):
        return self._part(FakeColumn, f"column{index}")

    def row(self, index):
        return self._part(FakeRange, f"row{index}")

    def cell(self, row, column):
        return self._part(FakeCell, f"cell({row},{column})")


class FakeSelection(SelectionHandle):
    def __init__(self, log):
        self.log = log
        self.style = {}
        self.point = "body"
        self.target = None

    @property
    def range(self):
        return self.point

    @property
    def cells(self):
        if self.target is not None:
            return self.target.cells
        if self.point.startswith("in "):
            return FakeCells([self.point[len("in "):]])
        return FakeCells([])

    def _where(self):
        return self.target.name if self.target is not None else self.point

    def _holder(self):
        return self.target.style if self.target is not None else self.style

    def get_style(self, axis):
        return self._holder().get(axis)

    def set_style(self, axis, value):
        self._holder()[axis] = value
        self.log.append(("style", self._where(), axis.value, value))

    def type_text(self, text):
        self.log.append(("type", self.point, text))

    def type_paragraph_break(self):
        self.log.append(("break", self.point))

    def type_into_cell(self, text):
        if not self.point.startswith("in cell"):
            raise MalformedStructure("not in a cell")
        self.log.append(("cell_text", self.point, text))

    def select(self, target):
        if isinstance(target, str):
            self.point = target
            self.target = None
            self.log.append(("select", target))
        else:
            self.target = target
            self.log.append(("select", target.name))

    def collapse_to_end(self):
        if isinstance(self.target, FakeTable):
            self.point = "body"
        self.target = None
        self.log.append(("collapse",))


class FakeDocument(DocumentHandle):
    def __init__(self, log, name):
        self.log = log
        self.name = name
        self._selection = FakeSelection(log)
        self.tables = []

    @property
    def selection(self):
        return self._selection

    def create_table(self, anchor, rows, columns):
        self.log.append(("create_table", anchor, rows, columns))
        table = FakeTable(self.log, rows, columns)
        self.tables.append(table)
        return table

    def save_as(self, path):
        self.log.append(("save", Path(path).name))


class FakeBackend(DocumentBackend):
    def __init__(self, active=False):
        self.log = []
        self.active = active
        self.documents = []
        self.lookups = []

    def load_constant(self, name):
        self.lookups.append(name)
        if name not in KNOWN_CONSTANTS:
            raise UnknownConstant(name)
        return name

    def open_or_create_document(self, path=None, force_new=False):
        name = Path(path).name if path is not None else None
        self.log.append(("open", name, force_new))
        document = FakeDocument(self.log, name or "")
        self.documents.append(document)
        return document

    def attach_active_document(self):
        if not self.active:
            raise BackendUnavailable("no active document")
        self.log.append(("attach",))
        document = FakeDocument(self.log, "active")
        self.documents.append(document)
        return document


def kinds(log, *names):
    """Entries of *log* whose first element is one of *names*."""
    return [entry for entry in log if entry[0] in names]
