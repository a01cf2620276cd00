"""Ordered collections of named properties."""

from .lib import PropertyBuilder

__all__ = ["PropertyBuilder"]
