from __future__ import annotations

"""Tri-state propagation between a parent mark and its children's marks.

This service is UI-agnostic and stateless: every method works on the
:class:`SelectionTree` passed in and returns the ids of the nodes whose mark
changed, so callers can build a delta for the presentation layer.

Rules
-----
Parent to children
    Every child in scope takes the target state; the parent takes exactly the
    target state (never indeterminate).
Children to parent, scope ALL
    No child checked gives unchecked, all checked gives checked, anything in
    between gives indeterminate.
Children to parent, scope VISIBLE_ONLY
    Same rule over the visible children, except that when no visible child is
    checked while a hidden one still is, the parent is left as it was.

A parent whose scope holds no children is never touched by the children to
parent rule. Each call is a single bounded pass: recomputing a parent never
re-triggers its children, so calls are idempotent.
"""

import logging
from typing import List, Set

from treeselect_toolkit.core.models import Mark, Scope
from treeselect_toolkit.core.state import Node, SelectionTree

logger = logging.getLogger(__name__)

__all__ = ["PropagationService"]


class PropagationService:
    """Keep parent and child marks of a :class:`SelectionTree` consistent."""

    # --------------------------------------------------------------------- API

    def on_parent_toggle(self, tree: SelectionTree, parent_id: str, target: bool, scope: Scope) -> Set[str]:
        """Apply a direct parent toggle and push it down to the children in scope.

        Parameters
        ----------
        tree : SelectionTree
            State to mutate.
        parent_id : str
            Node id of the toggled parent.
        target : bool
            New checked state of the parent.
        scope : Scope
            ``ALL`` updates every child; ``VISIBLE_ONLY`` leaves hidden children alone.

        Returns
        -------
        Set[str]
            Node ids whose mark changed.
        """
        parent = tree.node(parent_id)
        if parent is None or not parent.is_parent:
            logger.warning("on_parent_toggle: '%s' is not a parent of control '%s'", parent_id, tree.container_id)
            return set()

        mark = Mark.from_bool(target)
        changed: Set[str] = set()
        children = self._children_in_scope(tree, parent, scope)
        for child in children:
            if tree.set_mark(child.node_id, mark):
                changed.add(child.node_id)
        if tree.set_mark(parent.node_id, mark):
            changed.add(parent.node_id)

        logger.debug(
            "Parent %s %s, updated %d%s children out of %d total",
            parent.node_id, mark.value, len(children),
            " visible" if scope is Scope.VISIBLE_ONLY else "", len(parent.child_ids),
        )
        return changed

    def on_child_toggle(self, tree: SelectionTree, child_id: str, scope: Scope) -> Set[str]:
        """Re-derive the parent of ``child_id`` after the child's mark changed."""
        child = tree.node(child_id)
        if child is None or child.is_parent:
            logger.warning("on_child_toggle: '%s' is not a child of control '%s'", child_id, tree.container_id)
            return set()
        if child.parent_node_id is None:
            return set()
        return self.recompute_parent(tree, child.parent_node_id, scope)

    def recompute_parent(self, tree: SelectionTree, parent_id: str, scope: Scope) -> Set[str]:
        """Derive one parent's mark from its children in ``scope``."""
        parent = tree.node(parent_id)
        if parent is None or not parent.is_parent:
            return set()

        children = self._children_in_scope(tree, parent, scope)
        if not children:
            # Leaf parents and parents without visible children keep their mark
            return set()

        checked = sum(1 for child in children if tree.is_checked(child.node_id))
        if checked == 0:
            if scope is Scope.VISIBLE_ONLY and self._any_checked(tree, tree.children_of(parent_id)):
                # Hidden checked children still count globally
                return set()
            new_mark = Mark.UNCHECKED
        elif checked == len(children):
            new_mark = Mark.CHECKED
        else:
            new_mark = Mark.INDETERMINATE

        if not tree.set_mark(parent_id, new_mark):
            return set()
        logger.debug(
            "Parent %s -> %s (%d/%d %s children checked)",
            parent_id, new_mark.value, checked, len(children),
            "visible" if scope is Scope.VISIBLE_ONLY else "all",
        )
        return {parent_id}

    # --------------------------------------------------------------- Internals

    @staticmethod
    def _children_in_scope(tree: SelectionTree, parent: Node, scope: Scope) -> List[Node]:
        if scope is Scope.VISIBLE_ONLY:
            return tree.visible_children_of(parent.node_id)
        return tree.children_of(parent.node_id)

    @staticmethod
    def _any_checked(tree: SelectionTree, nodes: List[Node]) -> bool:
        return any(tree.is_checked(node.node_id) for node in nodes)
