import re
import unittest
from datetime import datetime, timezone

from track_vault.utils.path import (
    derive_export_filename,
    export_folder_name,
    make_stored_filename,
    safe_component,
)


class TestExportFilename(unittest.TestCase):
    def test_reference_example(self) -> None:
        self.assertEqual(
            derive_export_filename("DJ X!", "Go (Remix)", "Club Mix", "abc.mp3"),
            "dj_x__go__remix__club_mix.mp3",
        )

    def test_every_non_alphanumeric_character_becomes_underscore(self) -> None:
        self.assertEqual(safe_component("A-b.c d/e\\f"), "a_b_c_d_e_f")
        self.assertEqual(safe_component("Beyoncé"), "beyonc_")
        self.assertEqual(safe_component("Ünïcode 2"), "_n_code_2")
        self.assertEqual(safe_component("İstanbul"), "_stanbul")
        self.assertEqual(safe_component("abc123"), "abc123")

    def test_extension_comes_from_stored_filename(self) -> None:
        self.assertEqual(
            derive_export_filename("A", "B", "C", "track-1-2.FLAC"), "a_b_c.FLAC"
        )
        self.assertEqual(
            derive_export_filename("A", "B", "C", "archive.tar.gz"), "a_b_c.gz"
        )
        self.assertEqual(derive_export_filename("A", "B", "C", "noext"), "a_b_c")

    def test_derivation_is_deterministic(self) -> None:
        first = derive_export_filename("Artist", "Song", "Dub", "x.wav")
        second = derive_export_filename("Artist", "Song", "Dub", "y.wav")
        self.assertEqual(first, second)


class TestStoredFilename(unittest.TestCase):
    def test_format_keeps_extension(self) -> None:
        name = make_stored_filename("My Song.mp3")
        self.assertRegex(name, r"^track-\d+-\d+\.mp3$")

    def test_without_extension(self) -> None:
        self.assertRegex(make_stored_filename("README"), r"^track-\d+-\d+$")

    def test_names_are_unique(self) -> None:
        names = {make_stored_filename("a.wav") for _ in range(50)}
        self.assertGreater(len(names), 1)


class TestExportFolderName(unittest.TestCase):
    def test_name_is_second_precision_timestamp(self) -> None:
        moment = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
        self.assertEqual(export_folder_name(moment), "tracks-export-2024-01-02T03-04-05")

    def test_default_uses_now(self) -> None:
        self.assertTrue(
            re.fullmatch(
                r"tracks-export-\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}",
                export_folder_name(),
            )
        )


if __name__ == "__main__":
    unittest.main()
