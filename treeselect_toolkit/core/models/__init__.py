from __future__ import annotations

"""Shared data structures used across the selection engine.

This package exposes dataclasses, enums and value objects used by services and
other core layers. It is intentionally free of UI code so that the contained
objects can be reused in any context (unit-tests, CLI, GUI, etc.).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

__all__ = [
    "Identifier",
    "ChildRef",
    "normalize_id",
    "Mark",
    "Scope",
    "NodeKind",
    "SelectionMode",
    "Item",
    "SelectionRef",
    "SelectionItem",
    "SelectionResult",
    "HeaderState",
    "StateDelta",
]

Identifier = Union[str, int]

# A child id, or a ``{"parent": ..., "id": ...}`` mapping pinning it under one parent
ChildRef = Union[Identifier, Mapping[str, Identifier]]


def normalize_id(value: Identifier) -> str:
    """Return the comparison key of a caller-supplied identifier.

    Identifiers are compared by string equality, so ``1`` and ``"1"`` address
    the same item.
    """
    return str(value)


class Mark(str, Enum):
    """Tri-state value of a node. Only parents may be indeterminate."""

    UNCHECKED = "unchecked"
    CHECKED = "checked"
    INDETERMINATE = "indeterminate"

    @classmethod
    def from_bool(cls, checked: bool) -> "Mark":
        return cls.CHECKED if checked else cls.UNCHECKED


class Scope(str, Enum):
    """Which children a propagation pass looks at."""

    ALL = "all"
    VISIBLE_ONLY = "visible-only"


class NodeKind(str, Enum):
    PARENT = "parent"
    CHILD = "child"


class SelectionMode(str, Enum):
    """The four display modes, fixed for the lifetime of a control."""

    SINGLE_FLAT = "single-flat"
    SINGLE_TREE = "single-tree"
    MULTI_FLAT = "multi-flat"
    MULTI_TREE = "multi-tree"

    @classmethod
    def from_flags(cls, multi_select: bool, tree_view: bool) -> "SelectionMode":
        if multi_select:
            return cls.MULTI_TREE if tree_view else cls.MULTI_FLAT
        return cls.SINGLE_TREE if tree_view else cls.SINGLE_FLAT

    @property
    def is_multi(self) -> bool:
        return self in (SelectionMode.MULTI_FLAT, SelectionMode.MULTI_TREE)

    @property
    def is_tree(self) -> bool:
        return self in (SelectionMode.SINGLE_TREE, SelectionMode.MULTI_TREE)


@dataclass
class Item:
    """One entry of the two-level data tree supplied by the host.

    Attributes
    ----------
    id
        Caller identifier, kept with its original type for extraction results.
    name
        Display label.
    children
        Second-level items. Always empty for children themselves.
    """

    id: Identifier
    name: str
    children: List["Item"] = field(default_factory=list)

    @property
    def key(self) -> str:
        return normalize_id(self.id)

    def has_children(self) -> bool:
        return len(self.children) > 0

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], *, depth: int = 0) -> Optional["Item"]:
        """Build an item (and its children) from a plain mapping.

        Entries without an ``id`` are skipped with a warning. Third-level
        children are ignored since the tree is exactly two levels deep.
        """
        if isinstance(raw, Item):
            return raw
        if not isinstance(raw, Mapping):
            logger.warning("Ignoring data entry that is not a mapping: %r", raw)
            return None
        if raw.get("id") is None:
            logger.warning("Ignoring data entry without an id: %r", dict(raw))
            return None

        item_id = raw["id"]
        name = raw.get("name")
        item = cls(id=item_id, name=str(name) if name is not None else normalize_id(item_id))

        raw_children = raw.get("children") or []
        if depth >= 1:
            if raw_children:
                logger.warning("Ignoring nested children of child item %r (tree is two levels deep)", item_id)
            return item
        if not isinstance(raw_children, (list, tuple)):
            logger.warning("Ignoring children of item %r: expected a list, got %s", item_id, type(raw_children).__name__)
            return item
        for raw_child in raw_children:
            child = cls.from_dict(raw_child, depth=depth + 1)
            if child is not None:
                item.children.append(child)
        return item


@dataclass(frozen=True)
class SelectionRef:
    """``{id, name}`` back-reference to a parent item."""

    id: Identifier
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class SelectionItem:
    """One entry of a selection result; its populated fields depend on the mode.

    ``children`` is only set in multi-tree mode and ``parent`` only for a child
    picked in single-tree mode. ``checked`` records, for multi-tree entries,
    whether the parent's own mark is checked (as opposed to being listed only
    because some of its children are).

    ``shared_id`` flags a child whose id also appears under another parent;
    its payload entry then names the parent as well.
    """

    id: Identifier
    name: str
    kind: NodeKind = NodeKind.PARENT
    children: Optional[Tuple["SelectionItem", ...]] = None
    parent: Optional[SelectionRef] = None
    checked: bool = True
    shared_id: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        if self.parent is not None:
            data["parent"] = self.parent.to_dict()
        return data


def _child_ref(item: SelectionItem, parent_id: Optional[Identifier]) -> ChildRef:
    if item.shared_id and parent_id is not None:
        return {"parent": parent_id, "id": item.id}
    return item.id


@dataclass(frozen=True)
class SelectionResult:
    """Normalized selection of one control, as returned by ``get_selection``."""

    mode: Optional[SelectionMode]
    items: Tuple[SelectionItem, ...] = ()
    container_id: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return len(self.items) > 0

    @classmethod
    def empty(cls, container_id: Optional[str] = None) -> "SelectionResult":
        return cls(mode=None, items=(), container_id=container_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value if self.mode is not None else None,
            "items": [item.to_dict() for item in self.items],
            "has_data": self.has_data,
            "container_id": self.container_id,
        }

    def to_payload(self) -> Dict[str, List[Any]]:
        """Return the ``{parents, children}`` payload reproducing this selection.

        Children are listed by id, except a child whose id is shared with
        another parent, which is pinned as ``{"parent": ..., "id": ...}``.
        """
        parents: List[Identifier] = []
        children: List[ChildRef] = []
        for item in self.items:
            if item.kind is NodeKind.CHILD:
                children.append(_child_ref(item, item.parent.id if item.parent is not None else None))
                continue
            if item.checked:
                parents.append(item.id)
            for child in item.children or ():
                children.append(_child_ref(child, item.id))
        return {"parents": parents, "children": children}


@dataclass(frozen=True)
class HeaderState:
    """Text shown in the control header and whether it reflects a selection."""

    text: str
    has_selections: bool


@dataclass(frozen=True)
class StateDelta:
    """Changes produced by one pass of the ``apply_toggle`` pipeline.

    The host reflects ``marks`` and ``visibility`` (keyed by node id) into its
    presentation layer, then refreshes the header and navigator.
    """

    marks: Dict[str, Mark] = field(default_factory=dict)
    visibility: Dict[str, bool] = field(default_factory=dict)
    header: Optional[HeaderState] = None
    has_results: Optional[bool] = None
    show_navigator: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.marks and not self.visibility
