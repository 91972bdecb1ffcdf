"""Selection/formatting context: the emitter's cursor over the backend."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from .backend import DocumentHandle
from .style import StyleDelta, UndoRecord

logger = logging.getLogger(__name__)


class SelectionContext:
    """Wraps a document's selection with paired style apply/restore.

    ``styled()`` is the scoped form: the delta is applied on entry and the
    undo record restored on exit, also when the body raises.
    """

    def __init__(self, document: DocumentHandle):
        self.document = document
        self.selection = document.selection
        self._scopes: list[UndoRecord] = []

    @property
    def depth(self) -> int:
        return len(self._scopes)

    # -- Style ---------------------------------------------------------------

    def apply_style(self, delta: StyleDelta) -> UndoRecord:
        undo: UndoRecord = {}
        for axis, value in delta.items():
            undo[axis] = self.selection.get_style(axis)
            self.selection.set_style(axis, value)
        return undo

    def restore_style(self, undo: UndoRecord) -> None:
        for axis, value in undo.items():
            self.selection.set_style(axis, value)

    @contextmanager
    def styled(self, delta: StyleDelta) -> Iterator[UndoRecord]:
        undo = self.apply_style(delta)
        self._scopes.append(undo)
        try:
            yield undo
        finally:
            self._scopes.pop()
            self.restore_style(undo)

    # -- Content -------------------------------------------------------------

    def type_text(self, text: str) -> None:
        self.selection.type_text(text)

    def type_paragraph_break(self) -> None:
        self.selection.type_paragraph_break()

    def type_into_cell(self, text: str) -> None:
        self.selection.type_into_cell(text)

    # -- Positioning ---------------------------------------------------------

    @property
    def range(self) -> Any:
        return self.selection.range

    def select(self, target: Any) -> None:
        self.selection.select(target)

    def collapse_selection_to_end(self) -> None:
        self.selection.collapse_to_end()
