"""Style deltas resolved from node parameters.

A node's formatting parameters (``bold``, ``i-``, ``font=Arial``,
``align=center`` ...) become a :class:`StyleDelta` naming only the axes the
node actually specifies.  Applying a delta yields an undo record holding
the previous value of each touched axis.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator, Mapping

if TYPE_CHECKING:
    from .constants import ConstantTable


class StyleAxis(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    FONT = "font"
    SIZE = "size"
    ALIGN = "align"


@dataclass(frozen=True)
class StyleDelta:
    """Formatting changes for one scope; ``None`` means "leave alone"."""
    bold: bool | None = None
    italic: bool | None = None
    font: str | None = None
    size: Any = None
    align: Any = None

    def items(self) -> Iterator[tuple[StyleAxis, Any]]:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                yield StyleAxis(f.name), value

    def is_empty(self) -> bool:
        return next(self.items(), None) is None


# Previous value of every axis a delta changed
UndoRecord = dict[StyleAxis, Any]

_BOLD_ON = ("bold", "b")
_BOLD_OFF = ("not bold", "b-")
_ITALIC_ON = ("italic", "italics", "i")
_ITALIC_OFF = ("not italic", "not italics", "i-")


def _any_set(parameters: Mapping[str, Any], names: tuple[str, ...]) -> bool:
    return any(parameters.get(n) for n in names)


def resolve_style(parameters: Mapping[str, Any], constants: "ConstantTable") -> StyleDelta:
    """Translate a node's parameters into a :class:`StyleDelta`.

    The negative forms are checked last, so ``not bold`` beats ``bold``.
    """
    bold = None
    if _any_set(parameters, _BOLD_ON):
        bold = True
    if _any_set(parameters, _BOLD_OFF):
        bold = False

    italic = None
    if _any_set(parameters, _ITALIC_ON):
        italic = True
    if _any_set(parameters, _ITALIC_OFF):
        italic = False

    align = None
    if parameters.get("align"):
        align = constants.resolve(parameters["align"], "para-align")

    return StyleDelta(
        bold=bold,
        italic=italic,
        font=parameters.get("font") or None,
        size=parameters.get("size") or None,
        align=align,
    )
