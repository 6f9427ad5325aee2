"""Events accepted by the ``apply_toggle`` pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

__all__ = ["EventKind", "ToggleEvent"]


class EventKind(str, Enum):
    PARENT_TOGGLED = "parent-toggled"
    CHILD_TOGGLED = "child-toggled"
    OPTION_SELECTED = "option-selected"
    BULK = "bulk"
    SEARCH_CHANGED = "search-changed"
    CLEAR = "clear"


@dataclass(frozen=True)
class ToggleEvent:
    """A discrete user or API action on one control.

    ``checked`` is the new state of a toggled checkbox; ``None`` flips the
    current state.
    """

    kind: EventKind
    node_id: Optional[str] = None
    checked: Optional[bool] = None
    select: bool = True
    respect_search: bool = True
    term: str = ""

    @classmethod
    def parent_toggled(cls, node_id: str, checked: Optional[bool] = None) -> "ToggleEvent":
        return cls(EventKind.PARENT_TOGGLED, node_id=node_id, checked=checked)

    @classmethod
    def child_toggled(cls, node_id: str, checked: Optional[bool] = None) -> "ToggleEvent":
        return cls(EventKind.CHILD_TOGGLED, node_id=node_id, checked=checked)

    @classmethod
    def option_selected(cls, node_id: str) -> "ToggleEvent":
        return cls(EventKind.OPTION_SELECTED, node_id=node_id)

    @classmethod
    def bulk(cls, select: bool, respect_search: bool = True) -> "ToggleEvent":
        return cls(EventKind.BULK, select=select, respect_search=respect_search)

    @classmethod
    def search_changed(cls, term: str) -> "ToggleEvent":
        return cls(EventKind.SEARCH_CHANGED, term=term or "")

    @classmethod
    def clear(cls) -> "ToggleEvent":
        return cls(EventKind.CLEAR)
