"""Word constant lookup with short, namespaced aliases.

Word names its constants ``wd<Type><Name>`` (``wdLineStyleDashDotStroked``).
Any canonical name can be used directly; inside a namespace a shorter alias
(``single`` under ``linestyle``) may be used instead.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from docdecl.core.errors import UnknownConstant

logger = logging.getLogger(__name__)

# Word line widths, in points → constant suffix
_LINE_WIDTHS = {
    "0.25": "025", "0.5": "050", "0.75": "075", "1": "100", "1.5": "150",
    "2.25": "225", "3": "300", "4.5": "450", "6": "600",
}

ALIASES: dict[str, dict[str, str]] = {
    "linestyle": {
        "single": "wdLineStyleSingle",
        "double": "wdLineStyleDouble",
        "none": "wdLineStyleNone",
        "dotted": "wdLineStyleDot",
        "dashed": "wdLineStyleDashLargeGap",
        "dash-small": "wdLineStyleDashSmallGap",
        "dot-dash": "wdLineStyleDashDot",
        "dot-dot-dash": "wdLineStyleDashDotDot",
        "triple": "wdLineStyleTriple",
        "thick-thin": "wdLineStyleThickThinSmallGap",
        "thin-thick": "wdLineStyleThinThickSmallGap",
        "wavy": "wdLineStyleSingleWavy",
        "double-wavy": "wdLineStyleDoubleWavy",
        "emboss": "wdLineStyleEmboss3D",
        "engrave": "wdLineStyleEngrave3D",
        "inset": "wdLineStyleInset",
        "outset": "wdLineStyleOutset",
    },
    "linewidth": {
        **{pts: f"wdLineWidth{suffix}pt" for pts, suffix in _LINE_WIDTHS.items()},
        **{f"{pts}pt": f"wdLineWidth{suffix}pt" for pts, suffix in _LINE_WIDTHS.items()},
    },
    "color": {
        "auto": "wdColorAutomatic",
        "black": "wdColorBlack",
        "white": "wdColorWhite",
        "red": "wdColorRed",
        "green": "wdColorGreen",
        "blue": "wdColorBlue",
        "yellow": "wdColorYellow",
        "gray": "wdColorGray50",
        "grey": "wdColorGray50",
    },
    "border": {
        "left": "wdBorderLeft",
        "right": "wdBorderRight",
        "top": "wdBorderTop",
        "bottom": "wdBorderBottom",
        "horizontal": "wdBorderHorizontal",
        "vertical": "wdBorderVertical",
    },
    "para-align": {
        "left": "wdAlignParagraphLeft",
        "right": "wdAlignParagraphRight",
        "center": "wdAlignParagraphCenter",
        "justify": "wdAlignParagraphJustify",
        "distribute": "wdAlignParagraphDistribute",
    },
}

NONE_LINE_STYLE = "wdLineStyleNone"


class ConstantTable:
    """Resolves symbolic names against a backend's constant space."""

    def __init__(
        self,
        lookup: Callable[[str], Any],
        aliases: dict[str, dict[str, str]] | None = None,
    ):
        self._lookup = lookup
        self._aliases = aliases if aliases is not None else ALIASES

    def canonical_name(self, name: Any, namespace: str | None = None) -> str:
        name = str(name)
        if namespace is not None:
            return self._aliases.get(namespace, {}).get(name, name)
        return name

    def resolve(self, name: Any, namespace: str | None = None) -> Any:
        """Return the backend value for *name*, expanding aliases in *namespace*.

        Raises ``UnknownConstant`` when the canonical name is not defined.
        """
        canonical = self.canonical_name(name, namespace)
        try:
            return self._lookup(canonical)
        except UnknownConstant:
            logger.error("Unknown Word constant %r (namespace %s)", canonical, namespace)
            raise UnknownConstant(canonical, namespace) from None

    @property
    def none_line_style(self) -> Any:
        return self.resolve(NONE_LINE_STYLE)
