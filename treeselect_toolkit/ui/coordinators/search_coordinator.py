from __future__ import annotations

import logging
from typing import Callable, Optional

from treeselect_toolkit.core.models import HeaderState

logger = logging.getLogger(__name__)


class SearchCoordinator:
    """Coordinate search and navigation between the tree widget and the controller.

    The coordinator only moves data: the controller decides visibility and
    marks, the tree widget reflects them, and the header / "no results"
    callbacks refresh the surrounding panel.
    """

    def __init__(
        self,
        *,
        controller_getter: Callable[[], object],
        tree: object,
        update_header: Callable[[Optional[HeaderState]], None],
        show_no_results: Callable[[bool], None],
        update_navigator: Optional[Callable[[bool], None]] = None,
    ) -> None:
        self._get_controller = controller_getter
        self._tree = tree
        self._update_header = update_header
        self._show_no_results = show_no_results
        self._update_navigator = update_navigator

    # ------------------------------------------------------------------
    def term_changed(self, term: str) -> None:
        ctrl = self._get_controller()
        if ctrl is None:
            return
        try:
            delta = ctrl.handle_search(term)  # type: ignore[attr-defined]
        except Exception:
            logger.exception("Search failed for term %r", term)
            return

        try:
            self._tree.apply_delta(delta)  # type: ignore[attr-defined]
        except Exception:
            logger.exception("Tree refresh failed after search")

        has_results = delta.has_results if delta.has_results is not None else True
        try:
            self._show_no_results(not has_results)
        except Exception:
            logger.exception("No-results indicator update failed")

        # Parents recalculated for the new visible set may change the header
        if delta.marks:
            try:
                self._update_header(delta.header)
            except Exception:
                logger.exception("Header update failed after search")
            if self._update_navigator is not None:
                try:
                    self._update_navigator(delta.show_navigator)
                except Exception:
                    logger.exception("Navigator update failed after search")

    # ------------------------------------------------------------------
    def navigate_next(self) -> Optional[str]:
        """Focus the next selected target in the tree; return its node id."""
        ctrl = self._get_controller()
        if ctrl is None:
            return None
        try:
            node_id = ctrl.handle_next_selection()  # type: ignore[attr-defined]
        except Exception:
            logger.exception("Navigation to next selection failed")
            return None
        if node_id is None:
            return None
        try:
            self._tree.focus_node(node_id)  # type: ignore[attr-defined]
        except Exception:
            logger.exception("Could not focus node %s", node_id)
        return node_id

    # ------------------------------------------------------------------
    def selection_changed(self, delta: object) -> None:
        """Reflect a mark-changing delta (toggle, bulk, clear, set_selection)."""
        try:
            self._tree.apply_delta(delta)  # type: ignore[attr-defined]
        except Exception:
            logger.exception("Tree refresh failed")
        try:
            self._update_header(getattr(delta, "header", None))
        except Exception:
            logger.exception("Header update failed")
        if self._update_navigator is not None:
            try:
                self._update_navigator(bool(getattr(delta, "show_navigator", False)))
            except Exception:
                logger.exception("Navigator update failed")
