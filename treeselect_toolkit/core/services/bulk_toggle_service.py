from __future__ import annotations

"""Select-all / clear-all over the nodes currently in scope."""

import logging
from typing import List, Optional, Set

from treeselect_toolkit.core.models import Mark, Scope
from treeselect_toolkit.core.services.propagation_service import PropagationService
from treeselect_toolkit.core.state import Node, SelectionTree

logger = logging.getLogger(__name__)

__all__ = ["BulkToggleService"]


class BulkToggleService:
    """Bulk toggle for multi-select controls, delegating to :class:`PropagationService`.

    The node set is parents plus children in tree mode and parents only in flat
    mode. With ``respect_search`` and an active search filter, only visible
    nodes are touched; propagation then uses the visible-only scope so hidden
    children keep their marks and parents stay consistent with them.
    """

    def __init__(self, propagation: Optional[PropagationService] = None) -> None:
        self.propagation = propagation or PropagationService()

    def toggle_all(self, tree: SelectionTree, select: bool, respect_search: bool = True) -> Set[str]:
        """Check (``select=True``) or clear every node in scope.

        Clearing also resets indeterminate parents. Returns the node ids whose
        mark changed.
        """
        restricted = respect_search and tree.search_active
        scope = Scope.VISIBLE_ONLY if restricted else Scope.ALL
        target = Mark.from_bool(select)

        parents = self._in_scope(tree, tree.parents(), restricted)
        children = self._in_scope(tree, tree.all_children(), restricted) if tree.mode.is_tree else []

        changed: Set[str] = set()
        for parent in parents:
            if tree.get_mark(parent.node_id) is target:
                continue
            changed |= self.propagation.on_parent_toggle(tree, parent.node_id, select, scope)

        for child in children:
            if tree.get_mark(child.node_id) is target:
                continue
            if tree.set_mark(child.node_id, target):
                changed.add(child.node_id)
            changed |= self.propagation.on_child_toggle(tree, child.node_id, scope)

        logger.info(
            "%s executed for %s - %s (%d marks changed)",
            "Select All" if select else "Clear All", tree.container_id,
            "visible items only" if restricted else "all items", len(changed),
        )
        return changed

    @staticmethod
    def _in_scope(tree: SelectionTree, nodes: List[Node], restricted: bool) -> List[Node]:
        if not restricted:
            return nodes
        return [node for node in nodes if tree.is_visible(node.node_id)]
