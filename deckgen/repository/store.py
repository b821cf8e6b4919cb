"""
In-memory entity store.

One ``EntityStore`` instance holds one entity kind. Each instance owns its
map, its id counter and its lock, so stores never contend with each other.

Guarantees:
- Ids are 1-based, strictly increasing and never reused, even after delete
- Every value going in or out is a deep copy
- ``list()`` is ordered ascending by id
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Generic, Iterator, TypeVar

from deckgen.config import get_logger
from deckgen.exceptions import NotFoundError
from deckgen.models import Entity

logger = get_logger("repository.store")

E = TypeVar("E", bound=Entity)


class ReadWriteLock:
    """
    Readers/writer lock.

    Any number of readers may hold the lock together; a writer holds it
    alone. Waiting writers block new readers so writers are not starved.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class EntityStore(Generic[E]):
    """
    Thread-safe, id-keyed container for one entity kind.

    Example:
        >>> store: EntityStore[JobAd] = EntityStore("job ad")
        >>> created = store.create(JobAd(title="Backend Engineer"))
        >>> created.id
        1
    """

    def __init__(self, kind: str) -> None:
        """
        Initialize an empty store.

        Args:
            kind: Human-readable entity kind used in error messages
        """
        self.kind = kind
        self._items: dict[int, E] = {}
        self._next_id = 1
        self._lock = ReadWriteLock()

    def create(self, entity: E) -> E:
        """
        Store a copy of ``entity`` under the next id.

        Any id already set on the input is ignored.

        Returns:
            A copy of the stored entity with its id set
        """
        with self._lock.write():
            entity_id = self._next_id
            self._next_id += 1
            stored = entity.model_copy(update={"id": entity_id}, deep=True)
            self._items[entity_id] = stored
        logger.debug("Created %s %d", self.kind, entity_id)
        return stored.model_copy(deep=True)

    def get(self, entity_id: int) -> E:
        """
        Get a copy of the entity stored under ``entity_id``.

        Raises:
            NotFoundError: If no entity has this id
        """
        with self._lock.read():
            stored = self._items.get(entity_id)
            if stored is None:
                raise NotFoundError(f"{self.kind} with ID {entity_id} not found")
            return stored.model_copy(deep=True)

    def list(self) -> list[E]:
        """Get copies of all entities, ordered by id."""
        with self._lock.read():
            return [self._items[i].model_copy(deep=True) for i in sorted(self._items)]

    def update(self, entity: E) -> E:
        """
        Replace the entity stored under ``entity.id``.

        Raises:
            NotFoundError: If no entity has this id; nothing is changed
        """
        with self._lock.write():
            if entity.id not in self._items:
                raise NotFoundError(f"{self.kind} with ID {entity.id} not found for update")
            stored = entity.model_copy(deep=True)
            self._items[entity.id] = stored
        logger.debug("Updated %s %d", self.kind, entity.id)
        return stored.model_copy(deep=True)

    def delete(self, entity_id: int) -> None:
        """
        Remove the entity stored under ``entity_id``.

        The id is never handed out again.

        Raises:
            NotFoundError: If no entity has this id, on every call
        """
        with self._lock.write():
            if entity_id not in self._items:
                raise NotFoundError(f"{self.kind} with ID {entity_id} not found for deletion")
            del self._items[entity_id]
        logger.debug("Deleted %s %d", self.kind, entity_id)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._items)

    def __contains__(self, entity_id: object) -> bool:
        with self._lock.read():
            return entity_id in self._items

    def __repr__(self) -> str:
        return f"EntityStore(kind={self.kind!r}, size={len(self)})"
