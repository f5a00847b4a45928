"""
Resourcery Records — contracts for the backing record store.

The engine never persists anything itself. It talks to records and record
classes through the protocols below and finds record classes by name in
``RecordRegistry``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Type

logger = logging.getLogger("resourcery.records")

__all__ = [
    "BackingRecord",
    "RecordCollection",
    "RecordClass",
    "RecordRegistry",
    "StaleRecordError",
    "register_record",
]


class StaleRecordError(Exception):
    """Raised by a store when a write lost an optimistic-locking race."""


# ============================================================================
# Store Protocols
# ============================================================================

class BackingRecord(Protocol):
    """
    One persisted entity wrapped by a resource.

    Attribute values, foreign keys and relations are plain attributes on the
    record (``record.title``, ``record.author_id``, ``record.comments``).
    """

    errors: Mapping[str, List[str]]

    def is_valid(self) -> bool:
        """Run validations, refreshing ``errors``."""
        ...

    def save(self, validate: bool = True) -> bool:
        """
        Persist the record.

        Returns:
            False when the store refused the write. Populated ``errors``
            mean a validation-style refusal, empty ``errors`` a cancellation.

        Raises:
            StaleRecordError: Concurrent modification detected
        """
        ...

    def destroy(self) -> bool:
        ...


class RecordCollection(Protocol):
    """The value of a to-many relation on a record."""

    def __iter__(self) -> Iterator[Any]:
        ...

    def append(self, record: Any) -> None:
        """Link ``record`` immediately."""
        ...

    def delete(self, key: Any) -> None:
        """Unlink the member whose primary key is ``key`` immediately."""
        ...


class RecordClass(Protocol):
    """A record class doubles as the finder for its records."""

    def find_by_key(self, key: Any, context: Any = None) -> Optional[BackingRecord]:
        ...


# ============================================================================
# Registry
# ============================================================================

class RecordRegistry:
    """
    Global registry of record classes, keyed by class name.

    Resources resolve their backing class through it by convention
    (``PostResource`` → ``"Post"``) or an explicit ``Meta.model_name``.
    """

    _records: Dict[str, Type[Any]] = {}

    @classmethod
    def register(cls, record_cls: Type[Any], name: Optional[str] = None) -> Type[Any]:
        """Register a record class (usable as a decorator)."""
        name = name or record_cls.__name__
        if name in cls._records and cls._records[name] is not record_cls:
            logger.debug(f"Record class '{name}' re-registered")
        cls._records[name] = record_cls
        return record_cls

    @classmethod
    def get(cls, name: str) -> Optional[Type[Any]]:
        return cls._records.get(name)

    @classmethod
    def all_records(cls) -> Dict[str, Type[Any]]:
        return dict(cls._records)

    @classmethod
    def register_all(cls, record_classes: Iterable[Type[Any]]) -> None:
        for record_cls in record_classes:
            cls.register(record_cls)

    @classmethod
    def reset(cls) -> None:
        """Clear registry (for testing)."""
        cls._records.clear()


def register_record(record_cls: Type[Any]) -> Type[Any]:
    """Decorator form of ``RecordRegistry.register``."""
    return RecordRegistry.register(record_cls)
