"""Connector Woovi."""

from .adapter import WooviAdapter

__all__ = ["WooviAdapter"]
