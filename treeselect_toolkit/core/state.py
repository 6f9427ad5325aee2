from __future__ import annotations

"""In-memory selection state of one control.

:class:`SelectionTree` owns the node index, the mark map and the visibility
map. It is the single source of truth: presentation layers only render it.
It also provides the collaborator query surface (``is_visible``,
``set_mark``...) and the enumeration surface (``parents``, ``children_of``)
the engine services work against.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set

from treeselect_toolkit.core.identity import RenderPassContext, generate_id
from treeselect_toolkit.core.models import (
    Identifier,
    Item,
    Mark,
    NodeKind,
    SelectionMode,
    normalize_id,
)

logger = logging.getLogger(__name__)

__all__ = ["Node", "SelectionTree"]


@dataclass
class Node:
    """A rendered parent or child.

    ``node_id`` is unique within the control; it equals ``composite_id``
    unless the composite id is a duplicate, in which case an occurrence
    suffix (``#2``, ``#3``...) keeps both nodes independently addressable.
    """

    node_id: str
    composite_id: str
    kind: NodeKind
    item: Item
    parent_node_id: Optional[str] = None
    child_ids: List[str] = field(default_factory=list)

    @property
    def id(self) -> Identifier:
        return self.item.id

    @property
    def key(self) -> str:
        return self.item.key

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def is_parent(self) -> bool:
        return self.kind is NodeKind.PARENT

    def has_children(self) -> bool:
        return len(self.child_ids) > 0


class SelectionTree:
    """Node index plus mark and visibility maps for one control."""

    def __init__(self, container_id: str, mode: SelectionMode,
                 render_pass: Optional[RenderPassContext] = None) -> None:
        self.container_id = container_id
        self.mode = mode
        self.render_pass = render_pass or RenderPassContext(container_id)

        self._nodes: Dict[str, Node] = {}
        self._parent_ids: List[str] = []
        self._parents_by_key: Dict[str, List[str]] = {}
        self._children_by_key: Dict[str, List[str]] = {}
        self._marks: Dict[str, Mark] = {}
        self._visible: Dict[str, bool] = {}
        self._search_term: str = ""

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def build(self, items: Iterable[Item]) -> None:
        """(Re)build every node from ``items``; all marks start unchecked."""
        self.render_pass.begin()
        self._nodes.clear()
        self._parent_ids.clear()
        self._parents_by_key.clear()
        self._children_by_key.clear()
        self._marks.clear()
        self._visible.clear()
        self._search_term = ""

        for item in items:
            parent = self._add_node(NodeKind.PARENT, item, generate_id(self.container_id, item.id))
            self.render_pass.validate_id(parent.composite_id, item.id)
            self._parent_ids.append(parent.node_id)
            self._parents_by_key.setdefault(item.key, []).append(parent.node_id)

            # Children are only materialized when they are rendered
            if not self.mode.is_tree:
                continue
            for child_item in item.children:
                composite = generate_id(self.container_id, item.id, child_item.id)
                child = self._add_node(NodeKind.CHILD, child_item, composite, parent_node_id=parent.node_id)
                self.render_pass.validate_id(composite, item.id, child_item.id)
                parent.child_ids.append(child.node_id)
                self._children_by_key.setdefault(child_item.key, []).append(child.node_id)

        logger.debug(
            "Built tree for '%s' (%s): %d parents, %d nodes, %d duplicate ids",
            self.container_id, self.mode.value, len(self._parent_ids), len(self._nodes),
            len(self.render_pass.duplicates),
        )

    def _add_node(self, kind: NodeKind, item: Item, composite_id: str,
                  parent_node_id: Optional[str] = None) -> Node:
        occurrence = self.render_pass.occurrences(composite_id) + 1
        node_id = composite_id if occurrence == 1 else f"{composite_id}#{occurrence}"
        node = Node(node_id=node_id, composite_id=composite_id, kind=kind, item=item,
                    parent_node_id=parent_node_id)
        self._nodes[node_id] = node
        self._marks[node_id] = Mark.UNCHECKED
        self._visible[node_id] = True
        return node

    # ------------------------------------------------------------------
    # Enumeration surface
    # ------------------------------------------------------------------
    def node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def parents(self) -> List[Node]:
        return [self._nodes[node_id] for node_id in self._parent_ids]

    def children_of(self, parent_node_id: str) -> List[Node]:
        parent = self._nodes.get(parent_node_id)
        if parent is None:
            return []
        return [self._nodes[node_id] for node_id in parent.child_ids]

    def all_children(self) -> List[Node]:
        return [child for parent in self.parents() for child in self.children_of(parent.node_id)]

    def all_nodes(self) -> List[Node]:
        """Parents and children in render order (each parent followed by its children)."""
        ordered: List[Node] = []
        for parent in self.parents():
            ordered.append(parent)
            ordered.extend(self.children_of(parent.node_id))
        return ordered

    def parent_of(self, child_node_id: str) -> Optional[Node]:
        child = self._nodes.get(child_node_id)
        if child is None or child.parent_node_id is None:
            return None
        return self._nodes.get(child.parent_node_id)

    def find_parents(self, identifier: Identifier) -> List[Node]:
        return [self._nodes[n] for n in self._parents_by_key.get(normalize_id(identifier), [])]

    def find_children(self, identifier: Identifier) -> List[Node]:
        return [self._nodes[n] for n in self._children_by_key.get(normalize_id(identifier), [])]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    # ------------------------------------------------------------------
    # Marks
    # ------------------------------------------------------------------
    def get_mark(self, node_id: str) -> Mark:
        return self._marks.get(node_id, Mark.UNCHECKED)

    def is_checked(self, node_id: str) -> bool:
        return self._marks.get(node_id) is Mark.CHECKED

    def set_mark(self, node_id: str, mark: Mark) -> bool:
        """Set one mark; return True if it changed.

        Unknown nodes and an indeterminate mark on a child are refused.
        """
        node = self._nodes.get(node_id)
        if node is None:
            logger.warning("Cannot mark unknown node '%s' in control '%s'", node_id, self.container_id)
            return False
        if mark is Mark.INDETERMINATE and not node.is_parent:
            logger.warning("Refusing indeterminate mark on child node '%s'", node_id)
            return False
        if self._marks[node_id] is mark:
            return False
        self._marks[node_id] = mark
        return True

    def marks(self) -> Dict[str, Mark]:
        """Copy of the whole mark map."""
        return dict(self._marks)

    def checked_nodes(self) -> List[Node]:
        return [node for node in self.all_nodes() if self._marks[node.node_id] is Mark.CHECKED]

    def clear_marks(self) -> Set[str]:
        changed = {node_id for node_id, mark in self._marks.items() if mark is not Mark.UNCHECKED}
        for node_id in changed:
            self._marks[node_id] = Mark.UNCHECKED
        return changed

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------
    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def search_active(self) -> bool:
        return self._search_term != ""

    def is_visible(self, node_id: str) -> bool:
        return self._visible.get(node_id, False)

    def visible_children_of(self, parent_node_id: str) -> List[Node]:
        return [c for c in self.children_of(parent_node_id) if self._visible[c.node_id]]

    def apply_visibility(self, visible: Mapping[str, bool], term: str) -> Set[str]:
        """Store the search collaborator's result; return the node ids that changed.

        Nodes missing from ``visible`` keep their current visibility.
        """
        self._search_term = (term or "").strip()
        changed: Set[str] = set()
        for node_id, is_visible in visible.items():
            if node_id not in self._nodes:
                continue
            if self._visible[node_id] != bool(is_visible):
                self._visible[node_id] = bool(is_visible)
                changed.add(node_id)
        return changed
