"""
Collection Cache - in-memory snapshots of the durable collections.

Serves reads without touching disk, and keeps the snapshot coherent with
every write committed in this process.
"""

import copy
import logging
import threading
from contextlib import ExitStack, contextmanager
from typing import Dict, Iterator, List

from cineshelf.models.movie import Movie
from cineshelf.models.review import Review
from cineshelf.utils.errors import CollectionNotFoundError, CorruptDataError
from cineshelf.utils.storage import COLLECTIONS, DurableStore

logger = logging.getLogger(__name__)

ENTITY_TYPES = {
    "movies": Movie,
    "reviews": Review,
}


class CollectionCache:
    """
    Process-wide copy of each collection, loaded lazily from the store.

    Callers always receive deep copies, so nothing outside the cache can
    mutate a snapshot in place. Read-modify-write sequences must run inside
    locked() for the collections they touch.
    """

    def __init__(self, store: DurableStore):
        """
        Initialize an empty cache over a durable store.

        Args:
            store: Durable store backing every collection
        """
        self.store = store
        self._snapshots: Dict[str, List] = {}
        self._locks: Dict[str, threading.RLock] = {name: threading.RLock() for name in COLLECTIONS}

    @contextmanager
    def locked(self, *collections: str) -> Iterator[None]:
        """
        Hold the mutual-exclusion section of one or more collections.
        Locks are always taken in sorted name order.
        """
        with ExitStack() as stack:
            for name in sorted(set(collections)):
                stack.enter_context(self._lock(name))
            yield

    def get(self, collection: str, strict: bool = False) -> List:
        """
        Return a copy of the collection snapshot, loading it on first access.

        Args:
            collection: "movies" or "reviews"
            strict: Propagate CorruptDataError instead of degrading to empty.
                Write paths pass True so unreadable data is never overwritten.

        Returns:
            List of Movie or Review entities

        Raises:
            CorruptDataError: Only when strict=True and the collection is unreadable
        """
        with self._lock(collection):
            snapshot = self._snapshots.get(collection)
            if snapshot is None:
                try:
                    snapshot = self._load(collection)
                except CorruptDataError as e:
                    if strict:
                        raise
                    # Not cached: the next call retries the load
                    logger.error(f"Serving empty {collection}, persisted data is unreadable: {e}")
                    return []
                self._snapshots[collection] = snapshot
            else:
                logger.debug(f"Cache hit for {collection} ({len(snapshot)} entries)")
            return copy.deepcopy(snapshot)

    def put(self, collection: str, entities: List) -> None:
        """Replace the in-memory snapshot. Call only after a successful save."""
        with self._lock(collection):
            self._snapshots[collection] = copy.deepcopy(list(entities))

    def commit(self, collection: str, entities: List) -> None:
        """
        Persist the entities, then update the snapshot.

        Raises:
            IOFailureError: If the save fails. The snapshot is left untouched.
        """
        with self._lock(collection):
            self.store.save(collection, [entity.to_dict() for entity in entities])
            self.put(collection, entities)

    def invalidate(self, collection: str) -> None:
        """Force the next get() to reload from the store."""
        with self._lock(collection):
            self._snapshots.pop(collection, None)
            logger.debug(f"Invalidated {collection} snapshot")

    def clear(self) -> None:
        """Drop every snapshot."""
        for collection in COLLECTIONS:
            self.invalidate(collection)

    def is_loaded(self, collection: str) -> bool:
        return collection in self._snapshots

    def _lock(self, collection: str) -> threading.RLock:
        if collection not in self._locks:
            raise ValueError(f"Unknown collection: {collection}")
        return self._locks[collection]

    def _load(self, collection: str) -> List:
        entity_type = ENTITY_TYPES[collection]
        try:
            records = self.store.load(collection)
        except CollectionNotFoundError:
            logger.info(f"No persisted {collection} yet, starting empty")
            return []

        entities = []
        for record in records:
            try:
                entities.append(entity_type.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                raise CorruptDataError(f"Invalid {collection} record {record!r}: {e}") from e

        logger.info(f"Loaded {len(entities)} {collection} into cache")
        return entities
