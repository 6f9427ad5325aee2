from __future__ import annotations

"""Default search collaborator: substring matching into per-node visibility.

The engine only consumes the visibility map produced here; hosts with their
own matching rules can build the map themselves and hand it to
:meth:`SelectionTree.apply_visibility`.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict

from treeselect_toolkit.core.state import SelectionTree

logger = logging.getLogger(__name__)

__all__ = ["VisibilityResult", "SearchService"]


@dataclass(frozen=True)
class VisibilityResult:
    """Visibility of every node for one search term.

    Attributes
    ----------
    term
        The stripped term; empty means the filter is cleared.
    visible
        node id -> visible.
    has_results
        False when the filter hides every parent.
    """

    term: str
    visible: Dict[str, bool] = field(default_factory=dict)
    has_results: bool = True


class SearchService:
    """Case-insensitive substring search over parent and child labels.

    In tree mode a matching child is shown together with its parent, and a
    matching parent shows all of its children. In flat mode only parent
    labels are searched.
    """

    def compute_visibility(self, tree: SelectionTree, term: str) -> VisibilityResult:
        needle = (term or "").strip()
        visible: Dict[str, bool] = {}

        if needle == "":
            for node in tree.all_nodes():
                visible[node.node_id] = True
            return VisibilityResult(term="", visible=visible, has_results=len(tree.parents()) > 0)

        folded = needle.casefold()
        visible_parents = 0
        for parent in tree.parents():
            parent_matches = folded in parent.name.casefold()
            any_child_matches = False
            for child in tree.children_of(parent.node_id):
                child_matches = parent_matches or folded in child.name.casefold()
                visible[child.node_id] = child_matches
                any_child_matches = any_child_matches or folded in child.name.casefold()

            show_parent = parent_matches or any_child_matches
            visible[parent.node_id] = show_parent
            if show_parent:
                visible_parents += 1

        logger.debug("Search '%s' in %s: %d visible parents", needle, tree.container_id, visible_parents)
        return VisibilityResult(term=needle, visible=visible, has_results=visible_parents > 0)
