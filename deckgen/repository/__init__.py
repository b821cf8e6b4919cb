"""
In-memory repositories.

All state lives for the lifetime of the process; a restart loses every entity.
"""

from .store import EntityStore, ReadWriteLock

__all__ = ["EntityStore", "ReadWriteLock"]
