from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from treeselect_toolkit.core.control import SelectionControl
from treeselect_toolkit.core.models import Identifier, SelectionMode, SelectionResult, StateDelta
from treeselect_toolkit.core.models.events import ToggleEvent

logger = logging.getLogger(__name__)


class SelectionController:
    """Controller mapping UI events of one control onto the selection engine.

    The controller keeps transient UI state (search term, "no results" flag,
    navigator cursor) and forwards every mutation to
    :meth:`SelectionControl.apply_toggle`. It contains no UI toolkit code.

    Parameters
    ----------
    control : SelectionControl
        The engine-side control this controller drives.

    Notes
    -----
    - Every ``handle_*`` method is non-raising: engine failures are logged and
      reported as an empty :class:`StateDelta` so a Tk callback never aborts.
    - Bulk buttons are ignored outside multi-select mode.
    """

    def __init__(self, control: SelectionControl) -> None:
        self.control: SelectionControl = control

        # Transient UI-related state
        self.search_term: str = ""
        self.has_results: bool = True
        self.nav_target: Optional[str] = None

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    def _dispatch(self, event: ToggleEvent) -> StateDelta:
        try:
            delta = self.control.apply_toggle(event)
        except Exception:
            logger.exception("Event %s failed on control '%s'", event.kind.value, self.control.container_id)
            return StateDelta()
        if delta.marks:
            # Any mark change invalidates the navigator position
            self.nav_target = None
        return delta

    # ---------------------------------------------------------------------------------
    # Properties
    # ---------------------------------------------------------------------------------

    @property
    def mode(self) -> SelectionMode:
        return self.control.mode

    @property
    def container_id(self) -> str:
        return self.control.container_id

    # ---------------------------------------------------------------------------------
    # Event handlers
    # ---------------------------------------------------------------------------------

    def handle_node_activated(self, node_id: str) -> StateDelta:
        """Handle a click on a node, whatever the mode.

        Multi-select modes toggle the checkbox of the node; single-select
        modes make it the selected option.
        """
        node = self.control.tree.node(node_id)
        if node is None:
            logger.warning("Activated unknown node '%s' in control '%s'", node_id, self.container_id)
            return StateDelta()
        if not self.mode.is_multi:
            return self.handle_option_selected(node_id)
        if node.is_parent:
            return self.handle_parent_toggle(node_id)
        return self.handle_child_toggle(node_id)

    def handle_parent_toggle(self, node_id: str, checked: Optional[bool] = None) -> StateDelta:
        return self._dispatch(ToggleEvent.parent_toggled(node_id, checked))

    def handle_child_toggle(self, node_id: str, checked: Optional[bool] = None) -> StateDelta:
        return self._dispatch(ToggleEvent.child_toggled(node_id, checked))

    def handle_option_selected(self, node_id: str) -> StateDelta:
        return self._dispatch(ToggleEvent.option_selected(node_id))

    def handle_select_all(self) -> StateDelta:
        """Check every visible node (all nodes when no filter is active)."""
        if not self.mode.is_multi:
            return StateDelta()
        return self._dispatch(ToggleEvent.bulk(True))

    def handle_clear_all(self) -> StateDelta:
        """Clear every visible node (all nodes when no filter is active)."""
        return self._dispatch(ToggleEvent.clear())

    def handle_search(self, term: str) -> StateDelta:
        """Apply a search term and store the transient search state.

        Parameters
        ----------
        term : str
            The raw term typed by the user; surrounding whitespace is ignored.

        Returns
        -------
        StateDelta
            Visibility changes plus any parent recalculated for the new
            visible set. ``has_results`` tells whether to show the
            "no results" message.
        """
        self.search_term = (term or "").strip()
        delta = self._dispatch(ToggleEvent.search_changed(self.search_term))
        if delta.has_results is not None:
            self.has_results = delta.has_results
        return delta

    def handle_next_selection(self) -> Optional[str]:
        """Advance the navigator to the next selected target and return its node id."""
        try:
            self.nav_target = self.control.next_selection(self.nav_target)
        except Exception:
            logger.exception("Next selection failed on control '%s'", self.container_id)
            self.nav_target = None
        return self.nav_target

    # ---------------------------------------------------------------------------------
    # Read / write
    # ---------------------------------------------------------------------------------

    def get_selection(self) -> SelectionResult:
        try:
            return self.control.get_selection()
        except Exception:
            logger.exception("get_selection failed on control '%s'", self.container_id)
            return SelectionResult.empty(self.container_id)

    def set_selection(self, selections: Optional[Mapping[str, Iterable[Identifier]]] = None) -> StateDelta:
        try:
            delta = self.control.set_selection(selections)
        except Exception:
            logger.exception("set_selection failed on control '%s'", self.container_id)
            return StateDelta()
        self.nav_target = None
        return delta

    def get_summary(self) -> str:
        try:
            return self.control.summary()
        except Exception:
            logger.exception("Summary failed on control '%s'", self.container_id)
            return ""

    def show_navigator(self) -> bool:
        return self.mode.is_multi and self.control.selection_count() >= 2
