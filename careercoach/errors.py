"""Exceptions raised by the service layer."""

from __future__ import annotations


class PersistenceError(RuntimeError):
    """A write to the result store failed even after the fallback attempt."""
