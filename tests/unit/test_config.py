# PATH: tests/unit/test_config.py
"""
Unit tests for configuration loading.
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

CONFIG_DIR = Path(__file__).parent.parent.parent / "config"

ENV_KEYS = ("HOPS_API_URL", "HOPS_TIMEOUT_SECONDS", "HOPS_LOG_LEVEL")


def _clean_env():
    return {k: v for k, v in os.environ.items() if k not in ENV_KEYS}


class TestConfigLoading(unittest.TestCase):
    """Tests for config loading functions."""

    def test_config_dir_exists(self):
        """Config directory exists."""
        self.assertTrue(CONFIG_DIR.exists())

    def test_load_sdk_yaml(self):
        """Can load sdk.yaml."""
        from config import load_yaml
        data = load_yaml("sdk.yaml")

        self.assertIn("api", data)
        self.assertIn("execution", data)

    def test_load_yaml_missing(self):
        from config import load_yaml

        with self.assertRaises(FileNotFoundError):
            load_yaml("does_not_exist.yaml")

    def test_load_sdk_config_defaults(self):
        from config import load_sdk_config

        with patch.dict(os.environ, _clean_env(), clear=True):
            config = load_sdk_config()

        self.assertEqual(config.api_url, "https://test.li.finance/api/")
        self.assertEqual(config.timeout_seconds, 10)
        self.assertFalse(config.default_infinite_approval)

    def test_missing_file_gives_defaults(self):
        from config import load_sdk_config

        with patch.dict(os.environ, _clean_env(), clear=True):
            config = load_sdk_config(Path("/nonexistent/sdk.yaml"))

        self.assertEqual(config.log_level, "INFO")
        self.assertTrue(config.json_logs)

    def test_file_values(self):
        from config import load_sdk_config

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "sdk.yaml"
            path.write_text(
                "api:\n  url: http://localhost:8080/\n  timeout_seconds: 3\n"
                "execution:\n  infinite_approval: true\n",
                encoding="utf-8",
            )
            with patch.dict(os.environ, _clean_env(), clear=True):
                config = load_sdk_config(path)

        self.assertEqual(config.api_url, "http://localhost:8080/")
        self.assertEqual(config.timeout_seconds, 3)
        self.assertTrue(config.default_execution_settings().infinite_approval)

    def test_environment_overrides(self):
        from config import load_sdk_config

        env = {**_clean_env(), "HOPS_API_URL": "http://api.test/", "HOPS_TIMEOUT_SECONDS": "30"}
        with patch.dict(os.environ, env, clear=True):
            config = load_sdk_config()

        self.assertEqual(config.api_url, "http://api.test/")
        self.assertEqual(config.timeout_seconds, 30)


if __name__ == "__main__":
    unittest.main()
