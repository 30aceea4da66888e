import os
import tempfile
import unittest
from unittest.mock import patch

from nlc.config import Config, ConfigStore


class TestConfigStore(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.path = os.path.join(tmp.name, "nested", "config.json")

    def test_missing_file_reads_defaults(self):
        store = ConfigStore(self.path)
        self.assertIsNone(store.get("OPENAI_API_KEY"))
        self.assertEqual(store.get("MODEL_NAME", "gpt-4o-mini"), "gpt-4o-mini")

    def test_set_creates_file_and_persists(self):
        ConfigStore(self.path).set("OPENAI_API_KEY", "sk-test")
        ConfigStore(self.path).set("MODEL_NAME", "gpt-4o")

        store = ConfigStore(self.path)
        self.assertEqual(store.get("OPENAI_API_KEY"), "sk-test")
        self.assertEqual(store.get("MODEL_NAME"), "gpt-4o")

    def test_invalid_json_reads_as_empty(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{invalid json")

        self.assertEqual(ConfigStore(self.path).get("PROVIDER", "openai"), "openai")

    def test_non_object_json_reads_as_empty(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w", encoding="utf-8") as f:
            f.write('["a", "b"]')

        self.assertIsNone(ConfigStore(self.path).get("PROVIDER"))

    def test_env_var_overrides_default_path(self):
        with patch.dict(os.environ, {"NLC_CONFIG_FILE": self.path}):
            store = ConfigStore()
        self.assertEqual(store.path, self.path)


class TestConfig(unittest.TestCase):
    def test_load_applies_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            config = Config.load(ConfigStore(os.path.join(tmp, "config.json")))

        self.assertEqual(
            config,
            Config(
                api_key=None,
                model_name="gpt-4o-mini",
                provider="openai",
                base_url="http://localhost:1234/v1",
            ),
        )

    def test_load_reads_stored_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = ConfigStore(os.path.join(tmp, "config.json"))
            store.set("PROVIDER", "lmstudio")
            store.set("BASE_URL", "http://127.0.0.1:8080/v1")
            config = Config.load(store)

        self.assertEqual(config.provider, "lmstudio")
        self.assertEqual(config.base_url, "http://127.0.0.1:8080/v1")
