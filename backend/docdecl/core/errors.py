"""Errors raised while loading or emitting a declarative document tree."""

from __future__ import annotations


class EmissionError(Exception):
    """Base class for every failure that aborts a document emission."""


class UnknownConstant(EmissionError):
    """A symbolic constant is not present in the backend's constant space."""

    def __init__(self, name: str, namespace: str | None = None):
        self.name = name
        self.namespace = namespace
        if namespace:
            msg = f"No Word constant {name} defined (namespace {namespace!r})"
        else:
            msg = f"No Word constant {name} defined"
        super().__init__(msg)


class BackendUnavailable(EmissionError):
    """No document session could be obtained or created."""


class FileAccessDenied(EmissionError):
    """The target document exists but cannot be read."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Couldn't open file {path}")


class MalformedStructure(EmissionError):
    """The node tree violates a kind's child contract."""
