"""
Persistent key/value settings for nlc.

Settings live in a small JSON object on disk. The store is only read and
written by the CLI layer; the assistant core receives an immutable `Config`
snapshot instead of touching the store itself.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional

LOGGER = logging.getLogger(__name__)

CONFIG_FILE_ENV = "NLC_CONFIG_FILE"
DEFAULT_CONFIG_PATH = os.path.join("~", ".config", "nlc", "config.json")

API_KEY = "OPENAI_API_KEY"
MODEL_NAME = "MODEL_NAME"
PROVIDER = "PROVIDER"
BASE_URL = "BASE_URL"

DEFAULT_MODEL_NAME = "gpt-4o-mini"
DEFAULT_PROVIDER = "openai"
DEFAULT_BASE_URL = "http://localhost:1234/v1"

SUPPORTED_PROVIDERS = ("openai", "lmstudio")


class ConfigStore:
    """A JSON file backed key/value store."""

    def __init__(self, path: Optional[str] = None):
        self.path = os.path.expanduser(
            path or os.getenv(CONFIG_FILE_ENV) or DEFAULT_CONFIG_PATH
        )

    def _read(self) -> Dict:
        if not os.path.isfile(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as config_file:
                data = json.load(config_file)
        except (OSError, json.JSONDecodeError) as e:
            LOGGER.warning("Ignoring unreadable config file %s: %s", self.path, e)
            return {}

        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._read().get(key, default)

    def set(self, key: str, value: str):
        data = self._read()
        data[key] = value

        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as config_file:
            json.dump(data, config_file, indent=2)
        LOGGER.debug("Saved %s to %s", key, self.path)


@dataclass(frozen=True)
class Config:
    """Snapshot of the settings the assistant needs for one invocation."""

    api_key: Optional[str] = None
    model_name: Optional[str] = DEFAULT_MODEL_NAME
    provider: str = DEFAULT_PROVIDER
    base_url: str = DEFAULT_BASE_URL

    @classmethod
    def load(cls, store: ConfigStore) -> "Config":
        return cls(
            api_key=store.get(API_KEY),
            model_name=store.get(MODEL_NAME, DEFAULT_MODEL_NAME),
            provider=store.get(PROVIDER, DEFAULT_PROVIDER),
            base_url=store.get(BASE_URL, DEFAULT_BASE_URL),
        )
