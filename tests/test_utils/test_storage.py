"""
Unit tests for the durable store.
"""

import pytest
import json
import os
import tempfile
from unittest.mock import patch

from cineshelf.utils.errors import CollectionNotFoundError, CorruptDataError, IOFailureError, NotFoundError
from cineshelf.utils.storage import DurableStore


def test_load_missing_collection():
    """A collection that was never saved raises CollectionNotFoundError."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = DurableStore(tmpdir)

        with pytest.raises(CollectionNotFoundError):
            store.load("movies")

        # Callers may treat it as a generic NotFound
        with pytest.raises(NotFoundError):
            store.load("reviews")


def test_save_then_load():
    """A successful save is visible to the next load."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = DurableStore(tmpdir)
        records = [{"id": 1, "title": "Heat"}, {"id": 2, "title": "Ronin"}]

        store.save("movies", records)

        assert store.load("movies") == records
        assert not os.path.exists(os.path.join(tmpdir, "movies.json.tmp"))


def test_save_overwrites_collection():
    """save() replaces the whole collection, it does not append."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = DurableStore(tmpdir)
        store.save("movies", [{"id": 1}, {"id": 2}])
        store.save("movies", [{"id": 3}])

        assert store.load("movies") == [{"id": 3}]


def test_load_unparseable_file():
    """Broken JSON raises CorruptDataError."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = DurableStore(tmpdir)
        with open(os.path.join(tmpdir, "movies.json"), 'w') as f:
            f.write("[{\"id\": 1,")

        with pytest.raises(CorruptDataError):
            store.load("movies")


def test_load_non_array_file():
    """A JSON document that is not an array of objects is corrupt."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = DurableStore(tmpdir)

        with open(os.path.join(tmpdir, "movies.json"), 'w') as f:
            json.dump({"id": 1}, f)
        with pytest.raises(CorruptDataError, match="expected a JSON array"):
            store.load("movies")

        with open(os.path.join(tmpdir, "reviews.json"), 'w') as f:
            json.dump([1, 2, 3], f)
        with pytest.raises(CorruptDataError, match="must be an object"):
            store.load("reviews")


def test_unknown_collection():
    """Only movies and reviews are valid collection names."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = DurableStore(tmpdir)

        with pytest.raises(ValueError, match="Unknown collection"):
            store.load("users")
        with pytest.raises(ValueError, match="Unknown collection"):
            store.save("users", [])


def test_failed_save_keeps_previous_file():
    """A failed write raises IOFailureError and leaves the old file intact."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = DurableStore(tmpdir)
        store.save("movies", [{"id": 1}])

        with patch("cineshelf.utils.storage.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(IOFailureError, match="disk full"):
                store.save("movies", [{"id": 1}, {"id": 2}])

        assert store.load("movies") == [{"id": 1}]
        assert not os.path.exists(os.path.join(tmpdir, "movies.json.tmp"))


def test_sequences_round_trip():
    """Identity high-water marks persist alongside the collections."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = DurableStore(tmpdir)
        assert store.load_sequences() == {}

        store.save_sequences({"movies": 7, "reviews": 2})

        assert DurableStore(tmpdir).load_sequences() == {"movies": 7, "reviews": 2}


@pytest.mark.parametrize("value", ["seven", None, [3]])
def test_non_integer_sequence_is_corrupt(value):
    """A sequences file with a non-integer mark is reported as corrupt data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with open(os.path.join(tmpdir, "sequences.json"), 'w') as f:
            json.dump({"movies": value}, f)

        with pytest.raises(CorruptDataError, match="sequences"):
            DurableStore(tmpdir).load_sequences()


def test_failed_temp_cleanup_still_raises_io_failure():
    """An error while removing the temp file does not mask the write failure."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = DurableStore(tmpdir)

        with patch("cineshelf.utils.storage.os.replace", side_effect=OSError("disk full")), \
                patch("cineshelf.utils.storage.os.remove", side_effect=OSError("busy")):
            with pytest.raises(IOFailureError, match="disk full"):
                store.save("movies", [{"id": 1}])


def test_creates_missing_data_root():
    """The data root is created on construction."""
    with tempfile.TemporaryDirectory() as tmpdir:
        data_root = os.path.join(tmpdir, "nested", "data")
        DurableStore(data_root)

        assert os.path.isdir(data_root)


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
