"""Connector InfinitePay (checkout hospedado)."""

from .adapter import InfinitePayAdapter

__all__ = ["InfinitePayAdapter"]
