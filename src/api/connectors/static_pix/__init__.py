"""Connector de PIX estático (BR Code)."""

from .adapter import StaticPixAdapter

__all__ = ["StaticPixAdapter"]
