"""Configuration loader for kennel_pedigree.

Behavior:
- Load defaults.
- If a config path is given (or `KENNEL_PEDIGREE_CONFIG` is set), load that
  JSON file and merge.
- Environment variables override file values, unless a config path was passed
  explicitly: KENNEL_PEDIGREE_STORE, KENNEL_PEDIGREE_API_URL,
  KENNEL_PEDIGREE_API_TIMEOUT, KENNEL_PEDIGREE_LOG_LEVEL.

Generation depths are not configuration: they default in the operation
signatures (3 for pedigrees, 6 for linebreeding analysis).
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .dog_store import DEFAULT_STORE_PATH, JsonDogStore, RecordStore
from .registry_api import HttpDogStore

LOGGER = logging.getLogger(__name__)


@dataclass
class Settings:
    store_path: Path = DEFAULT_STORE_PATH
    api_base_url: Optional[str] = None
    api_timeout: float = 10.0
    log_level: str = "INFO"


def _load_json_file(path: Path) -> Optional[dict]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        LOGGER.warning("Ignoring unreadable config file %s: %s", path, e)
        return None


def load_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from (1) defaults, (2) JSON file, (3) env vars.

    :param config_path: optional path to a JSON config file. If not provided
                        `KENNEL_PEDIGREE_CONFIG` is used when set.
    """
    cfg = Settings()

    cp = config_path or os.environ.get("KENNEL_PEDIGREE_CONFIG")
    if cp:
        data = _load_json_file(Path(cp))
        if isinstance(data, dict):
            if data.get("store_path"):
                cfg.store_path = Path(data["store_path"])
            if "api_base_url" in data:
                cfg.api_base_url = data["api_base_url"] or None
            if data.get("api_timeout") is not None:
                cfg.api_timeout = float(data["api_timeout"])
            if data.get("log_level"):
                cfg.log_level = str(data["log_level"]).upper()

    # An explicit config path is authoritative: ambient env vars only apply
    # when the caller did not name a file.
    if config_path is None:
        if os.environ.get("KENNEL_PEDIGREE_STORE"):
            cfg.store_path = Path(os.environ["KENNEL_PEDIGREE_STORE"])
        if os.environ.get("KENNEL_PEDIGREE_API_URL"):
            cfg.api_base_url = os.environ["KENNEL_PEDIGREE_API_URL"]
        if os.environ.get("KENNEL_PEDIGREE_API_TIMEOUT"):
            cfg.api_timeout = float(os.environ["KENNEL_PEDIGREE_API_TIMEOUT"])
        if os.environ.get("KENNEL_PEDIGREE_LOG_LEVEL"):
            cfg.log_level = os.environ["KENNEL_PEDIGREE_LOG_LEVEL"].upper()

    return cfg


def open_store(settings: Settings) -> RecordStore:
    """Registry API when a base URL is configured, else the JSON snapshot."""
    if settings.api_base_url:
        LOGGER.info("Using registry API at %s", settings.api_base_url)
        return HttpDogStore(settings.api_base_url, timeout=settings.api_timeout)

    LOGGER.info("Using dog snapshot %s", settings.store_path)
    return JsonDogStore(settings.store_path)
