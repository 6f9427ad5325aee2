from __future__ import annotations

"""Re-derive parent tri-states after the visible node set changed."""

import logging
from typing import Optional, Set

from treeselect_toolkit.core.models import Scope, SelectionMode
from treeselect_toolkit.core.services.propagation_service import PropagationService
from treeselect_toolkit.core.state import SelectionTree

logger = logging.getLogger(__name__)

__all__ = ["VisibilityService"]


class VisibilityService:
    """Recalculate every parent once the search collaborator updated visibility.

    With the filter cleared all children count again (scope ALL). With an
    active filter only visible children count, and a parent whose hidden
    children are still checked is never flipped to unchecked.
    """

    def __init__(self, propagation: Optional[PropagationService] = None) -> None:
        self.propagation = propagation or PropagationService()

    def recalculate(self, tree: SelectionTree) -> Set[str]:
        """Return the ids of the parents whose mark changed."""
        if tree.mode is not SelectionMode.MULTI_TREE:
            return set()

        scope = Scope.VISIBLE_ONLY if tree.search_active else Scope.ALL
        changed: Set[str] = set()
        for parent in tree.parents():
            changed |= self.propagation.recompute_parent(tree, parent.node_id, scope)

        logger.debug(
            "Recalculated %d parents of %s with scope %s, %d changed",
            len(tree.parents()), tree.container_id, scope.value, len(changed),
        )
        return changed
