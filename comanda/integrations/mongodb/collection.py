"""MongoDB collection wrapper with index management and query helpers.

This module provides an IndexedCollection class that wraps a MongoDB
AsyncCollection with index management and helper methods for the query
patterns the gateway needs.
"""

from collections.abc import AsyncIterator
from enum import IntEnum
from typing import Any

from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection


class IndexDirection(IntEnum):
    """Sort direction for MongoDB index fields."""

    ASC = ASCENDING
    """Ascending order (1)."""

    DESC = DESCENDING
    """Descending order (-1)."""


class IndexSpec(BaseModel):
    """Specification for a MongoDB index.

    Example:
        >>> # Unique index
        >>> IndexSpec(keys=[("order_id", IndexDirection.ASC)], unique=True)
        >>>
        >>> # Compound index
        >>> IndexSpec(
        ...     keys=[
        ...         ("customer_tax_id", IndexDirection.ASC),
        ...         ("created_at", IndexDirection.DESC),
        ...     ],
        ... )
    """

    keys: list[tuple[str, IndexDirection]]
    """(field_name, direction) tuples."""

    unique: bool = False
    """If True, enforce uniqueness."""

    async def apply(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        """Apply this index specification to a collection.

        Creating an index that already exists with the same options is a
        no-op on the server.
        """
        kwargs: dict[str, Any] = {}
        if self.unique:
            kwargs["unique"] = True

        await collection.create_index(
            [(field, int(direction)) for field, direction in self.keys], **kwargs
        )


class IndexedCollection:
    """A MongoDB collection wrapper with index management.

    IndexedCollection wraps an AsyncCollection and handles:
    - Index creation (on first use, or eagerly via ensure_indexes)
    - Common query patterns (find one, find many)
    - Insert/replace/delete operations and atomic counters

    The gateway handles type conversion (via documents); IndexedCollection
    handles MongoDB operations and indexing.
    """

    def __init__(
        self,
        collection: AsyncCollection[dict[str, Any]],
        indexes: list["IndexSpec"] | None = None,
    ) -> None:
        self._collection = collection
        self._indexes = indexes or []
        self._indexes_created = False

    async def ensure_indexes(self) -> None:
        """Create indexes if not already created.

        Called automatically by other methods, but can be called
        explicitly for eager initialization.
        """
        if self._indexes_created:
            return

        for spec in self._indexes:
            await spec.apply(self._collection)

        self._indexes_created = True

    # ========== Find Operations ==========

    async def find_one(self, filter: dict[str, Any]) -> dict[str, Any] | None:
        await self.ensure_indexes()
        result: dict[str, Any] | None = await self._collection.find_one(filter)
        return result

    async def find(
        self,
        filter: dict[str, Any],
        sort: list[tuple[str, int]] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Find documents matching the filter.

        Args:
            filter: MongoDB query filter.
            sort: Optional list of (field, direction) tuples.

        Yields:
            Matching documents.
        """
        await self.ensure_indexes()

        cursor = self._collection.find(filter)
        if sort:
            cursor = cursor.sort(sort)

        async for doc in cursor:
            yield doc

    # ========== Write Operations ==========

    async def insert_one(self, document: dict[str, Any]) -> None:
        await self.ensure_indexes()
        await self._collection.insert_one(document)

    async def replace_one(
        self,
        filter: dict[str, Any],
        replacement: dict[str, Any],
        upsert: bool = False,
    ) -> None:
        await self.ensure_indexes()
        await self._collection.replace_one(filter, replacement, upsert=upsert)

    async def delete_one(self, filter: dict[str, Any]) -> None:
        await self.ensure_indexes()
        await self._collection.delete_one(filter)

    async def increment(self, filter: dict[str, Any], field: str) -> int:
        """Atomically add one to a numeric field and return the new value.

        The document is created if it does not exist, starting from 1.
        """
        await self.ensure_indexes()
        doc = await self._collection.find_one_and_update(
            filter,
            {"$inc": {field: 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(doc[field])
