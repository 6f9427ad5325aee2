from __future__ import annotations

"""Read and write a control's selection by caller identifiers.

One strategy class exists per :class:`SelectionMode`; the strategy is picked
once when the control is built (see :func:`strategy_for`), never re-derived
from the presentation tree.

Extraction never mutates marks. Injection clears the current selection first,
so applying the same payload twice yields the same marks.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Type

from treeselect_toolkit.core.models import (
    ChildRef,
    Identifier,
    Mark,
    NodeKind,
    Scope,
    SelectionItem,
    SelectionMode,
    SelectionRef,
    SelectionResult,
)
from treeselect_toolkit.core.services.propagation_service import PropagationService
from treeselect_toolkit.core.state import Node, SelectionTree

logger = logging.getLogger(__name__)

__all__ = [
    "SelectionStrategy",
    "SingleFlatStrategy",
    "SingleTreeStrategy",
    "MultiFlatStrategy",
    "MultiTreeStrategy",
    "strategy_for",
    "SelectionService",
]


def _as_id_list(values: Optional[Iterable[ChildRef]]) -> List[ChildRef]:
    if values is None:
        return []
    if isinstance(values, (str, int, Mapping)):
        return [values]
    return [value for value in values if value is not None]


def _child_candidates(tree: SelectionTree, ref: ChildRef) -> List[Node]:
    """Children addressed by ``ref``, in data order.

    A plain id matches under any parent; a ``{"parent", "id"}`` mapping only
    under parents with that id.
    """
    if not isinstance(ref, Mapping):
        return tree.find_children(ref)
    if ref.get("id") is None or ref.get("parent") is None:
        return []
    parent_node_ids = {parent.node_id for parent in tree.find_parents(ref["parent"])}
    return [child for child in tree.find_children(ref["id"]) if child.parent_node_id in parent_node_ids]


def _is_shared_child(tree: SelectionTree, node: Node) -> bool:
    return len(tree.find_children(node.id)) > 1


def _diff(before: Dict[str, Mark], after: Dict[str, Mark]) -> Set[str]:
    return {node_id for node_id, mark in after.items() if before.get(node_id) is not mark}


class SelectionStrategy:
    """Mode-specific extraction and injection."""

    mode: SelectionMode

    def __init__(self, propagation: Optional[PropagationService] = None) -> None:
        self.propagation = propagation or PropagationService()

    def is_selectable(self, tree: SelectionTree, node: Node) -> bool:
        return True

    def extract(self, tree: SelectionTree) -> List[SelectionItem]:
        raise NotImplementedError

    def inject(self, tree: SelectionTree, parents: Sequence[Identifier], children: Sequence[ChildRef]) -> Set[str]:
        raise NotImplementedError

    def clear(self, tree: SelectionTree) -> Set[str]:
        return tree.clear_marks()


class _SingleStrategy(SelectionStrategy):
    """At most one selected node, stored as the only checked mark."""

    def selected_node(self, tree: SelectionTree) -> Optional[Node]:
        for node in tree.all_nodes():
            if tree.is_checked(node.node_id):
                return node
        return None

    def select_option(self, tree: SelectionTree, node_id: str) -> Set[str]:
        """Replace the current selection with ``node_id`` if it can be selected."""
        node = tree.node(node_id)
        if node is None or not self.is_selectable(tree, node):
            logger.warning("Node '%s' is not a selectable option of control '%s'", node_id, tree.container_id)
            return set()
        before = tree.marks()
        tree.clear_marks()
        tree.set_mark(node.node_id, Mark.CHECKED)
        return _diff(before, tree.marks())

    def inject(self, tree: SelectionTree, parents: Sequence[Identifier], children: Sequence[ChildRef]) -> Set[str]:
        before = tree.marks()
        tree.clear_marks()

        target: Optional[Node] = None
        if parents:
            target_id, candidates = parents[0], tree.find_parents(parents[0])
        elif children:
            target_id, candidates = children[0], _child_candidates(tree, children[0])
        else:
            target_id, candidates = None, []

        if target_id is not None:
            target = next((n for n in candidates if self.is_selectable(tree, n)), None)
            if target is None:
                logger.warning(
                    "Could not find selectable element with id '%s' in single-select control '%s'",
                    target_id, tree.container_id,
                )
            else:
                tree.set_mark(target.node_id, Mark.CHECKED)

        return _diff(before, tree.marks())


class SingleFlatStrategy(_SingleStrategy):
    mode = SelectionMode.SINGLE_FLAT

    def is_selectable(self, tree: SelectionTree, node: Node) -> bool:
        return node.is_parent

    def extract(self, tree: SelectionTree) -> List[SelectionItem]:
        node = self.selected_node(tree)
        if node is None:
            return []
        return [SelectionItem(id=node.id, name=node.name)]


class SingleTreeStrategy(_SingleStrategy):
    """Children are options; a parent is an option only when it has no children."""

    mode = SelectionMode.SINGLE_TREE

    def is_selectable(self, tree: SelectionTree, node: Node) -> bool:
        if node.is_parent:
            return not node.has_children()
        return True

    def extract(self, tree: SelectionTree) -> List[SelectionItem]:
        node = self.selected_node(tree)
        if node is None:
            return []
        if node.is_parent:
            return [SelectionItem(id=node.id, name=node.name)]
        parent = tree.parent_of(node.node_id)
        parent_ref = SelectionRef(id=parent.id, name=parent.name) if parent is not None else None
        return [SelectionItem(id=node.id, name=node.name, kind=NodeKind.CHILD, parent=parent_ref,
                              shared_id=_is_shared_child(tree, node))]


class MultiFlatStrategy(SelectionStrategy):
    mode = SelectionMode.MULTI_FLAT

    def extract(self, tree: SelectionTree) -> List[SelectionItem]:
        return [
            SelectionItem(id=parent.id, name=parent.name)
            for parent in tree.parents()
            if tree.is_checked(parent.node_id)
        ]

    def inject(self, tree: SelectionTree, parents: Sequence[Identifier], children: Sequence[ChildRef]) -> Set[str]:
        before = tree.marks()
        tree.clear_marks()
        for parent_id in parents:
            matches = tree.find_parents(parent_id)
            if not matches:
                logger.warning("Unknown parent id '%s' ignored for control '%s'", parent_id, tree.container_id)
            for parent in matches:
                tree.set_mark(parent.node_id, Mark.CHECKED)
        if children:
            logger.info("Child ids %s ignored: control '%s' has no tree view", list(children), tree.container_id)
        return _diff(before, tree.marks())


class MultiTreeStrategy(SelectionStrategy):
    mode = SelectionMode.MULTI_TREE

    def extract(self, tree: SelectionTree) -> List[SelectionItem]:
        items: List[SelectionItem] = []
        for parent in tree.parents():
            checked_children = tuple(
                SelectionItem(id=child.id, name=child.name, kind=NodeKind.CHILD,
                              shared_id=_is_shared_child(tree, child))
                for child in tree.children_of(parent.node_id)
                if tree.is_checked(child.node_id)
            )
            parent_checked = tree.is_checked(parent.node_id)
            if parent_checked or checked_children:
                items.append(SelectionItem(
                    id=parent.id,
                    name=parent.name,
                    children=checked_children,
                    checked=parent_checked,
                ))
        return items

    def inject(self, tree: SelectionTree, parents: Sequence[Identifier], children: Sequence[ChildRef]) -> Set[str]:
        before = tree.marks()
        tree.clear_marks()
        # Scope follows the active filter, as for user toggles
        scope = Scope.VISIBLE_ONLY if tree.search_active else Scope.ALL

        for parent_id in parents:
            matches = tree.find_parents(parent_id)
            if not matches:
                logger.warning("Unknown parent id '%s' ignored for control '%s'", parent_id, tree.container_id)
            for parent in matches:
                self.propagation.on_parent_toggle(tree, parent.node_id, True, scope)

        for child_ref in children:
            matches = _child_candidates(tree, child_ref)
            if not matches:
                logger.warning("Unknown child id '%s' ignored for control '%s'", child_ref, tree.container_id)
                continue
            # A plain id shared by several parents addresses the first one in data order
            child = matches[0]
            tree.set_mark(child.node_id, Mark.CHECKED)
            self.propagation.on_child_toggle(tree, child.node_id, scope)
            parent = tree.parent_of(child.node_id)
            if parent is not None and tree.get_mark(parent.node_id) is Mark.UNCHECKED:
                # Marks were cleared above; a checked hidden child never leaves its parent unchecked
                self.propagation.recompute_parent(tree, parent.node_id, Scope.ALL)

        return _diff(before, tree.marks())


_STRATEGIES: Dict[SelectionMode, Type[SelectionStrategy]] = {
    SelectionMode.SINGLE_FLAT: SingleFlatStrategy,
    SelectionMode.SINGLE_TREE: SingleTreeStrategy,
    SelectionMode.MULTI_FLAT: MultiFlatStrategy,
    SelectionMode.MULTI_TREE: MultiTreeStrategy,
}


def strategy_for(mode: SelectionMode, propagation: Optional[PropagationService] = None) -> SelectionStrategy:
    """Return the extraction/injection strategy of ``mode``."""
    return _STRATEGIES[mode](propagation)


class SelectionService:
    """Mode-aware ``get_selection`` / ``set_selection`` over one tree."""

    def __init__(self, strategy: SelectionStrategy) -> None:
        self.strategy = strategy

    @property
    def mode(self) -> SelectionMode:
        return self.strategy.mode

    def get_selection(self, tree: SelectionTree) -> SelectionResult:
        return SelectionResult(
            mode=self.mode,
            items=tuple(self.strategy.extract(tree)),
            container_id=tree.container_id,
        )

    def set_selection(self, tree: SelectionTree, selections: Optional[Mapping[str, Iterable[Identifier]]] = None) -> Set[str]:
        """Replace the selection with the ``parents`` / ``children`` ids of ``selections``."""
        selections = selections or {}
        parents = _as_id_list(selections.get("parents"))
        children = _as_id_list(selections.get("children"))
        changed = self.strategy.inject(tree, parents, children)
        logger.info(
            "set_selection executed for %s with parents=%s children=%s (%d marks changed)",
            tree.container_id, parents, children, len(changed),
        )
        return changed

    def selection_count(self, tree: SelectionTree) -> int:
        """Number of checked nodes (parents and children)."""
        return len(tree.checked_nodes())
