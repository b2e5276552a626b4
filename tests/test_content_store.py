import tempfile
import unittest
from pathlib import Path

from track_vault.exceptions import ContentStoreError
from track_vault.storage.content_store import ContentStore


class TestContentStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.store = ContentStore(self.root / "uploads")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_write_read_exists(self) -> None:
        self.assertFalse(self.store.exists("a.mp3"))
        self.assertEqual(self.store.write("a.mp3", b"1234"), 4)
        self.assertTrue(self.store.exists("a.mp3"))
        self.assertEqual(self.store.read("a.mp3"), b"1234")

    def test_copy_is_verbatim(self) -> None:
        data = bytes(range(256)) * 10
        self.store.write("a.flac", data)
        dest = self.store.copy("a.flac", self.root / "copy.flac")
        self.assertEqual(dest.read_bytes(), data)

    def test_names_cannot_escape_root(self) -> None:
        for name in ("", ".", "..", "../secret", "dir/file.mp3", "dir\\file.mp3"):
            with self.subTest(name=name):
                with self.assertRaises(ContentStoreError):
                    self.store.path_for(name)
                self.assertFalse(self.store.exists(name))

    def test_remove_missing_is_noop(self) -> None:
        self.store.remove("never-written.mp3")
        self.store.write("x.mp3", b"x")
        self.store.remove("x.mp3")
        self.assertFalse(self.store.exists("x.mp3"))


class TestContentStoreAsync(unittest.IsolatedAsyncioTestCase):
    async def test_store_file_copies_in_chunks(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "big.wav"
            data = b"\x01\x02" * (ContentStore.CHUNK_SIZE + 7)
            source.write_bytes(data)
            store = ContentStore(root / "uploads")

            size = await store.store_file("track-1.wav", source)

            self.assertEqual(size, len(data))
            self.assertEqual(store.read("track-1.wav"), data)


if __name__ == "__main__":
    unittest.main()
