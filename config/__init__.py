# PATH: config/__init__.py
"""
Configuration loading utilities for HOPS.

sdk.yaml holds the defaults; HOPS_* environment variables (a .env file
is honoured) override them.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from core.constants import DEFAULT_API_URL, DEFAULT_TIMEOUT_SECONDS
from execution.settings import DEFAULT_EXECUTION_SETTINGS, ExecutionSettings, merge_settings


CONFIG_DIR = Path(__file__).parent


def load_yaml(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of file in config directory

    Returns:
        Parsed YAML as dict
    """
    filepath = CONFIG_DIR / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@dataclass
class SdkConfig:
    """SDK-wide configuration."""
    api_url: str = DEFAULT_API_URL
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    default_infinite_approval: bool = False
    log_level: str = "INFO"
    json_logs: bool = True

    def default_execution_settings(self) -> ExecutionSettings:
        """Execution defaults with the configured approval policy."""
        return merge_settings(
            ExecutionSettings(infinite_approval=self.default_infinite_approval),
            DEFAULT_EXECUTION_SETTINGS,
        )


def load_sdk_config(config_path: Optional[Path] = None) -> SdkConfig:
    """
    Load SDK configuration.

    Args:
        config_path: Path to a YAML file (default: config/sdk.yaml)

    Returns:
        SdkConfig with file values and environment overrides applied
    """
    load_dotenv()

    if config_path is None:
        config_path = CONFIG_DIR / "sdk.yaml"

    data: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    api = data.get("api", {})
    execution = data.get("execution", {})
    logging_cfg = data.get("logging", {})

    config = SdkConfig(
        api_url=api.get("url", DEFAULT_API_URL),
        timeout_seconds=int(api.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        default_infinite_approval=bool(execution.get("infinite_approval", False)),
        log_level=logging_cfg.get("level", "INFO"),
        json_logs=bool(logging_cfg.get("json", True)),
    )

    # Environment overrides
    if os.getenv("HOPS_API_URL"):
        config.api_url = os.environ["HOPS_API_URL"]
    if os.getenv("HOPS_TIMEOUT_SECONDS"):
        config.timeout_seconds = int(os.environ["HOPS_TIMEOUT_SECONDS"])
    if os.getenv("HOPS_LOG_LEVEL"):
        config.log_level = os.environ["HOPS_LOG_LEVEL"]

    return config
