"""Declarative Word document assembly."""

__version__ = "0.1.0"
