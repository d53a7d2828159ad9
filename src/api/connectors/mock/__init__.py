"""Connector sandbox (mock)."""

from .adapter import MockPaymentAdapter

__all__ = ["MockPaymentAdapter"]
