"""
Storage utility.

Durable flat-file store for the movie and review collections.
"""

import json
import os
import logging
from typing import Dict, List

from cineshelf.utils.errors import CollectionNotFoundError, CorruptDataError, IOFailureError

logger = logging.getLogger(__name__)

COLLECTIONS = ("movies", "reviews")
SEQUENCES_FILE = "sequences.json"


class DurableStore:
    """
    Sole writer of persisted catalog state.

    Handles:
    - Collections (data/movies.json, data/reviews.json): JSON arrays of flat records
    - Identity high-water marks (data/sequences.json)
    """

    def __init__(self, data_root: str):
        """
        Initialize durable store.

        Args:
            data_root: Root data directory (e.g., /path/to/data)
        """
        self.data_root = str(data_root)

        # Fail fast on an unwritable data root
        os.makedirs(self.data_root, exist_ok=True)

        logger.info(f"Initialized DurableStore with data_root={self.data_root}")

    def collection_path(self, collection: str) -> str:
        """Path of the JSON file holding a collection."""
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}. Must be one of {', '.join(COLLECTIONS)}")
        return os.path.join(self.data_root, f"{collection}.json")

    def load(self, collection: str) -> List[Dict]:
        """
        Load every record of a collection.

        Args:
            collection: "movies" or "reviews"

        Returns:
            List of record dicts

        Raises:
            CollectionNotFoundError: If the collection has never been saved
            CorruptDataError: If the file is unreadable or not a JSON array of objects
        """
        filepath = self.collection_path(collection)

        if not os.path.exists(filepath):
            logger.debug(f"No persisted {collection} found at {filepath}")
            raise CollectionNotFoundError(f"Collection not found: {collection}")

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                records = json.load(f)
        except (OSError, ValueError) as e:
            raise CorruptDataError(f"Failed to read {collection} from {filepath}: {e}") from e

        if not isinstance(records, list):
            raise CorruptDataError(
                f"Invalid {collection} file {filepath}: expected a JSON array, got {type(records).__name__}"
            )
        if not all(isinstance(record, dict) for record in records):
            raise CorruptDataError(f"Invalid {collection} file {filepath}: every record must be an object")

        logger.debug(f"Loaded {len(records)} {collection} from {filepath}")
        return records

    def save(self, collection: str, records: List[Dict]) -> None:
        """
        Overwrite a collection with the given records.

        Args:
            collection: "movies" or "reviews"
            records: Full list of record dicts

        Raises:
            IOFailureError: If the file could not be written
        """
        filepath = self.collection_path(collection)
        self._write_json(filepath, records)
        logger.info(f"Saved {len(records)} {collection} to {filepath}")

    def load_sequences(self) -> Dict[str, int]:
        """
        Load the highest id ever allocated per collection.

        Returns:
            Dict of collection -> high-water id (empty if never saved)

        Raises:
            CorruptDataError: If the sequences file is unreadable
        """
        filepath = os.path.join(self.data_root, SEQUENCES_FILE)

        if not os.path.exists(filepath):
            return {}

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                sequences = json.load(f)
        except (OSError, ValueError) as e:
            raise CorruptDataError(f"Failed to read sequences from {filepath}: {e}") from e

        if not isinstance(sequences, dict):
            raise CorruptDataError(f"Invalid sequences file {filepath}: expected a JSON object")

        try:
            return {name: int(value) for name, value in sequences.items()}
        except (TypeError, ValueError) as e:
            raise CorruptDataError(f"Invalid sequences file {filepath}: {e}") from e

    def save_sequences(self, sequences: Dict[str, int]) -> None:
        """Persist the per-collection high-water ids."""
        self._write_json(os.path.join(self.data_root, SEQUENCES_FILE), sequences)

    def _write_json(self, filepath: str, data) -> None:
        """Write JSON to a temp file, then atomically rename it over the target."""
        temp_path = f"{filepath}.tmp"
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            os.replace(temp_path, filepath)

        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write {filepath}: {e}")
            # Clean up temp file if it exists
            if os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError as cleanup_error:
                    logger.warning(f"Could not remove temp file {temp_path}: {cleanup_error}")
            raise IOFailureError(f"Failed to write {filepath}: {e}") from e
