import json
import tempfile
import threading
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

from track_vault.exceptions import (
    DuplicateTrackError,
    StorageIOError,
    StorageReadCorruption,
)
from track_vault.models.track import TrackRecord
from track_vault.storage.track_store import TrackStore

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def _record(track_id: str, minutes: int = 0, **overrides) -> TrackRecord:
    fields = {
        "id": track_id,
        "original_filename": f"{track_id}.mp3",
        "stored_filename": f"track-{track_id}.mp3",
        "track_title": f"Title {track_id}",
        "mix_name": "Original Mix",
        "primary_artist": "Artist",
        "featured_artists": None,
        "upload_timestamp": BASE_TIME + timedelta(minutes=minutes),
        "file_size_bytes": 1024,
        "mime_type": "audio/mpeg",
    }
    fields.update(overrides)
    return TrackRecord(**fields)


class TestTrackStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = Path(self._tmp.name) / "db" / "tracks.json"
        self.store = TrackStore(self.db_path)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_initializes_empty_document(self) -> None:
        self.assertTrue(self.db_path.is_file())
        self.assertEqual(json.loads(self.db_path.read_text(encoding="utf-8")), [])
        self.assertEqual(self.store.list_all(), [])

    def test_list_all_sorts_newest_first(self) -> None:
        self.store.append(_record("a", minutes=1))
        self.store.append(_record("b", minutes=3))
        self.store.append(_record("c", minutes=2))

        self.assertEqual([r.id for r in self.store.list_all()], ["b", "c", "a"])

    def test_ties_keep_insertion_order(self) -> None:
        self.store.append(_record("first", minutes=5))
        self.store.append(_record("older", minutes=0))
        self.store.append(_record("second", minutes=5))
        self.store.append(_record("third", minutes=5))

        self.assertEqual(
            [r.id for r in self.store.list_all()],
            ["first", "second", "third", "older"],
        )

    def test_round_trip_preserves_every_field(self) -> None:
        originals = [
            _record("a", minutes=2, featured_artists=["MC One", "Singer, Two"]),
            _record("b", minutes=1, featured_artists=None),
        ]
        for record in originals:
            self.store.append(record)

        reopened = TrackStore(self.db_path).list_all()

        self.assertEqual(reopened, originals)
        self.assertIsNone(reopened[1].featured_artists)
        raw = json.loads(self.db_path.read_text(encoding="utf-8"))
        self.assertIsNone(raw[1]["featured_artists"])

    def test_list_all_is_idempotent(self) -> None:
        for i in range(5):
            self.store.append(_record(str(i), minutes=i % 2))

        self.assertEqual(self.store.list_all(), self.store.list_all())

    def test_document_is_indented_json(self) -> None:
        self.store.append(_record("a"))
        text = self.db_path.read_text(encoding="utf-8")
        self.assertIn('\n  {\n    "id": "a"', text)

    def test_corrupt_document_reads_as_empty_and_logs(self) -> None:
        self.db_path.write_text("{not json", encoding="utf-8")

        with self.assertLogs("track_vault.storage.track_store", level="ERROR"):
            self.assertEqual(self.store.list_all(), [])

    def test_append_refuses_to_overwrite_corrupt_document(self) -> None:
        self.db_path.write_text("{not json", encoding="utf-8")

        with self.assertRaises(StorageReadCorruption):
            self.store.append(_record("a"))
        self.assertEqual(self.db_path.read_text(encoding="utf-8"), "{not json")

    def test_append_write_failure_raises_storage_io_error(self) -> None:
        self.store.append(_record("kept"))

        with patch(
            "track_vault.storage.track_store.os.replace",
            side_effect=OSError(28, "No space left on device"),
        ):
            with self.assertRaises(StorageIOError):
                self.store.append(_record("lost"))

        self.assertEqual([r.id for r in self.store.list_all()], ["kept"])
        self.assertFalse(self.db_path.with_name("tracks.json.tmp").exists())

    def test_duplicate_id_is_rejected(self) -> None:
        self.store.append(_record("a"))
        with self.assertRaises(DuplicateTrackError):
            self.store.append(_record("a", minutes=10))
        self.assertEqual(len(self.store.list_all()), 1)

    def test_legacy_json_string_featured_artists_are_decoded(self) -> None:
        legacy = _record("a").to_json_dict()
        legacy["featured_artists"] = json.dumps(["A", "B"])
        legacy["upload_timestamp"] = "2024-05-01T12:00:00.000Z"
        self.db_path.write_text(json.dumps([legacy], indent=2), encoding="utf-8")

        records = self.store.list_all()

        self.assertEqual(records[0].featured_artists, ["A", "B"])
        self.assertEqual(records[0].upload_timestamp, BASE_TIME)

    def test_concurrent_appends_lose_nothing(self) -> None:
        k = 25
        barrier = threading.Barrier(k)
        errors = []

        def worker(i: int) -> None:
            store = TrackStore(self.db_path)
            barrier.wait()
            try:
                store.append(_record(f"t{i}", minutes=i))
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(k)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        records = self.store.list_all()
        self.assertEqual(len(records), k)
        self.assertEqual(len({r.id for r in records}), k)

    def test_get_stats(self) -> None:
        self.store.append(_record("a", primary_artist="X", file_size_bytes=10))
        self.store.append(_record("b", primary_artist="Y", file_size_bytes=20))
        self.store.append(_record("c", primary_artist="X", file_size_bytes=30))

        stats = self.store.get_stats()

        self.assertEqual(stats["total_tracks"], 3)
        self.assertEqual(stats["total_size_bytes"], 60)
        self.assertEqual(stats["top_artists"][0], ("X", 2))


class TestTrackStoreAsync(unittest.IsolatedAsyncioTestCase):
    async def test_async_append_and_list(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = TrackStore(Path(tmp) / "tracks.json")
            await store.append_async(_record("a"))
            records = await store.list_all_async()
            self.assertEqual([r.id for r in records], ["a"])


if __name__ == "__main__":
    unittest.main()
