"""Capabilities the emitter needs from a document-automation backend.

The emitter drives documents only through these interfaces; a concrete
backend (see ``docx_backend``) binds them to a real editing library.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterator, Protocol

from .style import StyleAxis


class Collection(Protocol):
    """A host collection with a count and 1-based item access."""

    @property
    def count(self) -> int: ...

    def item(self, index: int) -> Any: ...


def iter_collection(collection: Collection) -> Iterator[Any]:
    """Lazily iterate a 1-based host collection."""
    count = collection.count
    for i in range(1, count + 1):
        yield collection.item(i)


def get_list(collection: Collection) -> list[Any]:
    """Return every item of a 1-based host collection as a list."""
    return list(iter_collection(collection))


class BorderTarget(ABC):
    """Anything that accepts per-edge border settings."""

    @abstractmethod
    def set_border(self, edge: Any, style: Any, color: Any = None, width: Any = None) -> None:
        ...


class RangeHandle(BorderTarget):
    """A selectable region of a table (whole table, column, row or cell)."""

    @property
    @abstractmethod
    def cells(self) -> Collection:
        ...


class CellHandle(RangeHandle):
    @property
    @abstractmethod
    def content(self) -> Any:
        """Insertion point at the start of the cell's text."""
        ...


class ColumnHandle(RangeHandle):
    @abstractmethod
    def set_preferred_width(self, width: float, width_type: Any) -> None:
        ...


class TableHandle(RangeHandle):
    @property
    @abstractmethod
    def row_count(self) -> int:
        ...

    @property
    @abstractmethod
    def column_count(self) -> int:
        ...

    @abstractmethod
    def column(self, index: int) -> ColumnHandle:
        ...

    @abstractmethod
    def row(self, index: int) -> RangeHandle:
        ...

    @abstractmethod
    def cell(self, row: int, column: int) -> CellHandle:
        ...


class SelectionHandle(ABC):
    """The host's cursor: either an insertion point or a selected range."""

    @property
    @abstractmethod
    def range(self) -> Any:
        """Anchor for structural insertions at the current position."""
        ...

    @property
    @abstractmethod
    def cells(self) -> Collection:
        ...

    @abstractmethod
    def get_style(self, axis: StyleAxis) -> Any:
        ...

    @abstractmethod
    def set_style(self, axis: StyleAxis, value: Any) -> None:
        ...

    @abstractmethod
    def type_text(self, text: str) -> None:
        ...

    @abstractmethod
    def type_paragraph_break(self) -> None:
        ...

    @abstractmethod
    def type_into_cell(self, text: str) -> None:
        ...

    @abstractmethod
    def select(self, target: Any) -> None:
        ...

    @abstractmethod
    def collapse_to_end(self) -> None:
        ...


class DocumentHandle(ABC):
    name: str = ""

    @property
    @abstractmethod
    def selection(self) -> SelectionHandle:
        ...

    @abstractmethod
    def create_table(self, anchor: Any, rows: int, columns: int) -> TableHandle:
        ...

    @abstractmethod
    def save_as(self, path: Path) -> None:
        ...


class DocumentBackend(ABC):
    """One automation session against the host application."""

    @abstractmethod
    def open_or_create_document(self, path: Path | None = None, force_new: bool = False) -> DocumentHandle:
        ...

    @abstractmethod
    def attach_active_document(self) -> DocumentHandle:
        ...

    @abstractmethod
    def load_constant(self, name: str) -> Any:
        """Return the host value for *name*; raise ``UnknownConstant`` if absent."""
        ...
