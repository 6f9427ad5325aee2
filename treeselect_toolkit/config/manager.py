from __future__ import annotations

"""Configuration loading and access helpers.

This module centralises the declarative settings of the toolkit (default
texts, display separators, logging setup).  It loads YAML files packaged with
*treeselect_toolkit* and merges them with user overrides located in the user
configuration directory.

On Windows: ``%LOCALAPPDATA%\\TreeSelectToolkit\\config\\*.yml``
On Unix: ``~/.treeselect_toolkit/*.yml``
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager"]


def _get_user_config_dir() -> Path:
    """Get the user configuration directory."""
    if os.name == 'nt':  # Windows
        local_appdata = os.environ.get('LOCALAPPDATA')
        if local_appdata:
            return Path(local_appdata) / "TreeSelectToolkit" / "config"
        return Path.home() / "AppData" / "Local" / "TreeSelectToolkit" / "config"
    return Path.home() / ".treeselect_toolkit"


def _read_packaged(filename: str) -> str:
    return pkg_resources.files(__package__).joinpath(filename).read_text(encoding="utf-8")


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "control_defaults": "control_defaults.yml",
        "logging": "logging.yml",
        "demo": "demo.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    @classmethod
    def reset(cls) -> None:
        """Drop the cached instance so the next call reloads from disk."""
        cls._instance = None

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_control_defaults(self) -> Dict[str, Any]:
        return self._data.get("control_defaults", {})

    def get_display_config(self) -> Dict[str, Any]:
        defaults = self.get_control_defaults()
        display = defaults.get("display") if isinstance(defaults, dict) else None
        return display if isinstance(display, dict) else {}

    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    def get_demo_config(self) -> Dict[str, Any]:
        """Data and control definitions used by the demo launcher."""
        return self._data.get("demo", {})

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        startup_summary = []
        user_config_dir = _get_user_config_dir()

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = {}
            status = "missing"

            # 1. load packaged default
            try:
                packaged_data = yaml.safe_load(_read_packaged(filename)) or {}
                merged_cfg.update(packaged_data)
                status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. load user overrides
            user_path = user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    merged_cfg.update(user_data)
                    if status == "loaded":
                        status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            if not merged_cfg:
                merged_cfg = dict(self._builtin_defaults().get(key, {}))
            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.info("Config startup: %s", " | ".join(startup_summary))

    @staticmethod
    def _builtin_defaults() -> Dict[str, Dict[str, Any]]:
        """Return the minimal settings used when a packaged file is unreadable."""
        return {
            "control_defaults": {
                "placeholder": "Select...",
                "display": {"tree_separator": " ← ", "item_separator": ", "},
            },
            "logging": {},
            "demo": {"data": [], "controls": []},
        }
