"""
Identity Allocator.

Assigns the next integer id per collection. Ids are never reused: the
highest id ever allocated is persisted, so deleting the current maximum
does not free its id.
"""

import logging
import threading
from typing import Dict, List, Optional

from cineshelf.utils.storage import DurableStore

logger = logging.getLogger(__name__)


class IdentityAllocator:
    """
    Per-collection id sequence.

    Not safe across processes. Within a process, callers must hold the
    collection lock (see CollectionCache.locked) while allocating and saving.
    """

    def __init__(self, store: DurableStore):
        self.store = store
        self._high_water: Optional[Dict[str, int]] = None
        # sequences.json holds every collection, so writes are serialized here too
        self._lock = threading.Lock()

    def next(self, collection: str, entities: List) -> int:
        """
        Allocate the next id for a collection.

        Args:
            collection: "movies" or "reviews"
            entities: Current snapshot of the collection

        Returns:
            1 for an empty collection with no history, otherwise
            max(highest existing id, highest id ever allocated) + 1

        Raises:
            IOFailureError: If the new high-water mark cannot be persisted
        """
        with self._lock:
            next_id = self.peek(collection, entities)

            high_water = dict(self._load_high_water())
            high_water[collection] = next_id
            self.store.save_sequences(high_water)
            self._high_water = high_water

        logger.debug(f"Allocated {collection} id {next_id}")
        return next_id

    def observe(self, collection: str, entities: List) -> None:
        """
        Raise the high-water mark to the largest id in a snapshot.

        Called before entities are removed, so a deleted maximum id is
        remembered even if it was never allocated through next().
        """
        with self._lock:
            high_water = self._load_high_water()
            current_max = max((entity.id for entity in entities), default=0)
            if current_max <= high_water.get(collection, 0):
                return

            updated = dict(high_water)
            updated[collection] = current_max
            self.store.save_sequences(updated)
            self._high_water = updated

    def peek(self, collection: str, entities: List) -> int:
        """Return the id next() would allocate, without reserving it."""
        high_water = self._load_high_water()
        current_max = max((entity.id for entity in entities), default=0)
        return max(current_max, high_water.get(collection, 0)) + 1

    def _load_high_water(self) -> Dict[str, int]:
        if self._high_water is None:
            self._high_water = self.store.load_sequences()
        return self._high_water
