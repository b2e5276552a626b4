import tempfile
import unittest
from pathlib import Path

from track_vault.exceptions import ConfigurationError
from track_vault.storage.config_manager import ConfigManager


class TestConfigManager(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.config_file = self.root / "conf" / "config.ini"
        self.manager = ConfigManager(self.config_file)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(ConfigurationError):
            self.manager.load_config()

    def test_save_and_load_round_trip(self) -> None:
        self.manager.save_new_config({"data_dir": str(self.root / "data"), "max_workers": 6})

        config = ConfigManager(self.config_file).load_config()

        self.assertEqual(config.max_workers, 6)
        self.assertEqual(config.max_upload_mb, 100)
        self.assertFalse(config.json_logs)
        self.assertEqual(config.uploads_path, self.root / "data" / "uploads")
        self.assertEqual(config.database_path, self.root / "data" / "db" / "tracks.json")
        self.assertEqual(config.exports_path, self.root / "data" / "exports")
        self.assertEqual(config.config_path, str(self.config_file.parent))

    def test_relative_and_absolute_overrides(self) -> None:
        self.manager.save_new_config(
            {
                "data_dir": str(self.root / "data"),
                "uploads_dir": "payloads",
                "exports_dir": str(self.root / "out"),
            }
        )

        config = self.manager.load_config()

        self.assertEqual(config.uploads_path, self.root / "data" / "payloads")
        self.assertEqual(config.exports_path, self.root / "out")

    def test_cli_options_override_file(self) -> None:
        self.manager.save_new_config({"data_dir": str(self.root)})
        config = self.manager.load_config({"max_workers": 2, "json_logs": True})
        self.assertEqual(config.max_workers, 2)
        self.assertTrue(config.json_logs)

    def test_invalid_values_raise(self) -> None:
        self.manager.save_new_config({"data_dir": str(self.root), "max_workers": 99})
        with self.assertRaises(ConfigurationError):
            self.manager.load_config()

    def test_missing_data_dir_raises(self) -> None:
        self.manager.save_new_config({})
        with self.assertRaises(ConfigurationError):
            self.manager.load_config()

    def test_non_integer_value_raises(self) -> None:
        self.config_file.parent.mkdir(parents=True)
        self.config_file.write_text(
            "[DEFAULT]\ndata_dir = /tmp/x\nmax_upload_mb = lots\n", encoding="utf-8"
        )
        with self.assertRaises(ConfigurationError):
            self.manager.load_config()

    def test_missing_keys_are_migrated(self) -> None:
        self.config_file.parent.mkdir(parents=True)
        self.config_file.write_text(
            f"[DEFAULT]\ndata_dir = {self.root}\n", encoding="utf-8"
        )

        config = self.manager.load_config()

        self.assertEqual(config.max_workers, 4)
        text = self.config_file.read_text(encoding="utf-8")
        self.assertIn("max_upload_mb = 100", text)
        self.assertIn("json_logs = false", text)


if __name__ == "__main__":
    unittest.main()
