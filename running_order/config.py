"""Configuration and bundled reference data."""

from __future__ import annotations

import copy
import logging
import pathlib
from functools import lru_cache
from typing import Any

from .utils import read_env, read_yaml

logger = logging.getLogger(__name__)

PACKAGE_DIR = pathlib.Path(__file__).resolve().parent
DEFAULT_CONFIG = PACKAGE_DIR / "config.yaml"
REFERENCE_DATA = PACKAGE_DIR / "data" / "afcon2025.yaml"
CONFIG_ENV = "RUNNING_ORDER_CONFIG"


def load_config(path: str | pathlib.Path | None = None) -> dict:
    """Load the bundled config, overlaid with a user file when given.

    The override comes from ``path`` or the ``RUNNING_ORDER_CONFIG``
    environment variable. Top-level keys of the override replace the
    bundled ones.
    """
    cfg = copy.deepcopy(_bundled_config())
    override = path or read_env(CONFIG_ENV)
    if override:
        logger.info("loading config override %s", override)
        data = read_yaml(override) or {}
        if not isinstance(data, dict):
            raise ValueError(f"config {override} must be a mapping, got {type(data).__name__}")
        cfg.update(data)
    return cfg


@lru_cache(maxsize=1)
def _bundled_config() -> dict:
    return read_yaml(DEFAULT_CONFIG) or {}


@lru_cache(maxsize=1)
def _reference() -> dict:
    return read_yaml(REFERENCE_DATA)


def default_stadiums() -> list[dict[str, Any]]:
    return copy.deepcopy(_reference()["stadiums"])


def default_teams() -> list[dict[str, Any]]:
    return copy.deepcopy(_reference()["teams"])


def default_categories() -> list[dict[str, Any]]:
    return copy.deepcopy(_reference()["categories"])


def default_competition() -> dict[str, Any]:
    return copy.deepcopy(_reference()["competition"])


def default_non_matchday_schedule() -> dict[str, Any]:
    return copy.deepcopy(_reference()["non_matchday_schedule"])
