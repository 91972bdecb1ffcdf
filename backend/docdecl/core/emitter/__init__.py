"""Declarative tree → Word document emission engine.

Public API: ``DocumentEmitter`` (see ``converter``).
"""

from .converter import CodeScope, DocumentEmitter

__all__ = ["CodeScope", "DocumentEmitter"]
