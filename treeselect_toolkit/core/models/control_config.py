"""Control configuration models.

Data structures describing one control instance: its container, placeholder,
data tree and feature flags. ``ControlConfig.from_params`` accepts the plain
mapping hosts pass to ``initialize`` and performs strict flag validation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from treeselect_toolkit.core.exceptions import ConfigurationError
from treeselect_toolkit.core.models import Item, SelectionMode

logger = logging.getLogger(__name__)

__all__ = ["ControlFlags", "ControlConfig", "FLAG_NAMES"]

# Canonical flag name -> accepted spellings
FLAG_NAMES: Dict[str, tuple] = {
    "search": ("search", "hasSearch", "has_search"),
    "multi_select": ("multiSelect", "multi_select", "hasMultiSelect", "has_multi_select"),
    "tree_view": ("treeView", "tree_view", "hasTreeView", "has_tree_view"),
    "select_all_btn": ("selectAllBtn", "select_all_btn", "hasSelectAllBtn", "has_select_all_btn"),
    "clear_all_btn": ("clearAllBtn", "clear_all_btn", "hasClearAllBtn", "has_clear_all_btn"),
}


def _strict_flag(name: str, raw: Any) -> bool:
    """Resolve one flag value; only a literal boolean enables a feature.

    Accepts ``{"enabled": bool}`` as well as a bare boolean. Anything else
    (``1``, ``"yes"``, ``None``...) disables the flag with a warning.
    """
    value = raw.get("enabled") if isinstance(raw, Mapping) else raw
    if value is True or value is False:
        return value
    logger.warning(
        "Flag '%s' must be a literal true or false, received: %s (%r). Defaulting to false.",
        name, type(value).__name__, value,
    )
    return False


@dataclass(frozen=True)
class ControlFlags:
    """Feature toggles of one control."""

    search: bool = False
    multi_select: bool = False
    tree_view: bool = False
    select_all_btn: bool = False
    clear_all_btn: bool = False

    @property
    def mode(self) -> SelectionMode:
        return SelectionMode.from_flags(self.multi_select, self.tree_view)

    @property
    def show_select_all(self) -> bool:
        """Bulk buttons only exist in multi-select mode."""
        return self.multi_select and self.select_all_btn

    @property
    def show_clear_all(self) -> bool:
        return self.multi_select and self.clear_all_btn

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "ControlFlags":
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            logger.warning("Flags must be a mapping, received %s; all flags disabled", type(raw).__name__)
            return cls()

        known = {alias: canonical for canonical, aliases in FLAG_NAMES.items() for alias in aliases}
        values: Dict[str, bool] = {}
        for key, raw_value in raw.items():
            canonical = known.get(key)
            if canonical is None:
                logger.warning("Unknown flag '%s' ignored", key)
                continue
            values[canonical] = _strict_flag(key, raw_value)
        return cls(**values)


@dataclass
class ControlConfig:
    """Validated configuration of one control instance."""

    container_id: str
    placeholder: str
    label: str = ""
    data: List[Item] = field(default_factory=list)
    flags: ControlFlags = field(default_factory=ControlFlags)

    def __post_init__(self) -> None:
        if not isinstance(self.container_id, str) or not self.container_id.strip():
            raise ConfigurationError("containerId is required")

    @property
    def mode(self) -> SelectionMode:
        return self.flags.mode

    @classmethod
    def from_params(cls, params: Mapping[str, Any], *, default_placeholder: str = "Select...") -> "ControlConfig":
        """Build a configuration from the mapping a host passes to ``initialize``.

        Parameters
        ----------
        params
            ``containerId`` (required), ``placeholder``, ``label``, ``data`` and
            ``flags``.
            Snake-case spellings (``container_id``) are accepted too.
        default_placeholder
            Used when ``placeholder`` is missing or empty.

        Raises
        ------
        ConfigurationError
            If the container id is missing or ``data`` is not a list.
        """
        if not isinstance(params, Mapping):
            raise ConfigurationError(f"Configuration must be a mapping, received {type(params).__name__}")

        container_id = params.get("containerId", params.get("container_id"))
        if not isinstance(container_id, str) or not container_id.strip():
            raise ConfigurationError("containerId is required", problems=["containerId"])

        raw_data = params.get("data") or []
        if not isinstance(raw_data, (list, tuple)):
            raise ConfigurationError(
                f"data must be a list of items, received {type(raw_data).__name__}",
                container_id=container_id,
                problems=["data"],
            )
        items = [item for item in (Item.from_dict(entry) for entry in raw_data) if item is not None]

        placeholder = params.get("placeholder") or default_placeholder
        label = params.get("label") or ""
        flags = ControlFlags.from_mapping(params.get("flags"))

        return cls(
            container_id=container_id,
            placeholder=str(placeholder),
            label=str(label),
            data=items,
            flags=flags,
        )
