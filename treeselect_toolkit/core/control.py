from __future__ import annotations

"""One selection control: tree state, mode strategy and services wired together.

:class:`SelectionControl` is the single entry point for every mutation of a
control. Each user or API action goes through :meth:`SelectionControl.apply_toggle`,
an ordered pipeline (mark change, propagation, visibility recalculation,
header refresh) that returns a :class:`StateDelta` for the presentation layer.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from treeselect_toolkit.core.identity import DuplicateId
from treeselect_toolkit.core.models import (
    HeaderState,
    Identifier,
    Mark,
    Scope,
    SelectionMode,
    SelectionResult,
    StateDelta,
)
from treeselect_toolkit.core.models.control_config import ControlConfig
from treeselect_toolkit.core.models.events import EventKind, ToggleEvent
from treeselect_toolkit.core.services.bulk_toggle_service import BulkToggleService
from treeselect_toolkit.core.services.display_text_service import DisplayTextService
from treeselect_toolkit.core.services.propagation_service import PropagationService
from treeselect_toolkit.core.services.search_service import SearchService
from treeselect_toolkit.core.services.selection_service import SelectionService, strategy_for
from treeselect_toolkit.core.services.visibility_service import VisibilityService
from treeselect_toolkit.core.state import SelectionTree

logger = logging.getLogger(__name__)

__all__ = ["SelectionControl"]


class SelectionControl:
    """Engine-side state of one control instance.

    Parameters
    ----------
    config : ControlConfig
        Validated configuration; the selection mode is fixed from its flags.
    display_config : dict, optional
        Separators for header text (see ``ConfigManager.get_display_config``).
    search_service : SearchService, optional
        Collaborator computing per-node visibility for a search term.
    """

    def __init__(self, config: ControlConfig, display_config: Optional[Dict[str, Any]] = None,
                 search_service: Optional[SearchService] = None) -> None:
        self.config = config
        self.mode: SelectionMode = config.mode

        self.propagation = PropagationService()
        self.bulk = BulkToggleService(self.propagation)
        self.selection = SelectionService(strategy_for(self.mode, self.propagation))
        self.visibility = VisibilityService(self.propagation)
        self.display = DisplayTextService(display_config)
        self.search = search_service or SearchService()

        self.tree = SelectionTree(config.container_id, self.mode)
        self.tree.build(config.data)

        logger.info(
            "Control '%s' initialized in %s mode with %d parents",
            self.container_id, self.mode.value, len(self.tree.parents()),
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def container_id(self) -> str:
        return self.config.container_id

    @property
    def placeholder(self) -> str:
        return self.config.placeholder

    @property
    def duplicates(self) -> List[DuplicateId]:
        """Duplicate composite ids detected during the last render pass."""
        return self.tree.render_pass.duplicates

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def apply_toggle(self, event: ToggleEvent) -> StateDelta:
        """Run one event through the pipeline and return what changed."""
        if event.kind is EventKind.SEARCH_CHANGED:
            return self._delta(*self._on_search_changed(event))

        handler = {
            EventKind.PARENT_TOGGLED: self._on_parent_toggled,
            EventKind.CHILD_TOGGLED: self._on_child_toggled,
            EventKind.OPTION_SELECTED: self._on_option_selected,
            EventKind.BULK: self._on_bulk,
            EventKind.CLEAR: self._on_clear,
        }.get(event.kind)
        if handler is None:
            logger.warning("Unsupported event %r for control '%s'", event.kind, self.container_id)
            return self._delta(set())
        return self._delta(handler(event))

    def _toggle_scope(self) -> Scope:
        return Scope.VISIBLE_ONLY if self.tree.search_active else Scope.ALL

    def _on_parent_toggled(self, event: ToggleEvent) -> Set[str]:
        if not self.mode.is_multi:
            logger.warning("Parent toggles need a multi-select control; '%s' is %s",
                           self.container_id, self.mode.value)
            return set()
        node = self.tree.node(event.node_id) if event.node_id is not None else None
        if node is None or not node.is_parent:
            logger.warning("Unknown parent node '%s' in control '%s'", event.node_id, self.container_id)
            return set()

        checked = event.checked
        if checked is None:
            # Indeterminate flips to checked, like a native tri-state checkbox
            checked = self.tree.get_mark(node.node_id) is not Mark.CHECKED
        return self.propagation.on_parent_toggle(self.tree, node.node_id, checked, self._toggle_scope())

    def _on_child_toggled(self, event: ToggleEvent) -> Set[str]:
        if self.mode is not SelectionMode.MULTI_TREE:
            logger.warning("Child toggles need a multi-select tree control; '%s' is %s",
                           self.container_id, self.mode.value)
            return set()
        node = self.tree.node(event.node_id) if event.node_id is not None else None
        if node is None or node.is_parent:
            logger.warning("Unknown child node '%s' in control '%s'", event.node_id, self.container_id)
            return set()

        checked = event.checked
        if checked is None:
            checked = not self.tree.is_checked(node.node_id)
        changed: Set[str] = set()
        if self.tree.set_mark(node.node_id, Mark.from_bool(checked)):
            changed.add(node.node_id)
        changed |= self.propagation.on_child_toggle(self.tree, node.node_id, self._toggle_scope())
        return changed

    def _on_option_selected(self, event: ToggleEvent) -> Set[str]:
        if self.mode.is_multi:
            logger.warning("Option selection needs a single-select control; '%s' is %s",
                           self.container_id, self.mode.value)
            return set()
        if event.node_id is None:
            return set()
        return self.selection.strategy.select_option(self.tree, event.node_id)

    def _on_bulk(self, event: ToggleEvent) -> Set[str]:
        if not self.mode.is_multi:
            if event.select:
                logger.warning("Select All ignored: control '%s' is single-select", self.container_id)
                return set()
            return self.selection.strategy.clear(self.tree)
        return self.bulk.toggle_all(self.tree, event.select, event.respect_search)

    def _on_clear(self, event: ToggleEvent) -> Set[str]:
        if self.mode.is_multi:
            return self.bulk.toggle_all(self.tree, False, respect_search=True)
        return self.selection.strategy.clear(self.tree)

    def _on_search_changed(self, event: ToggleEvent) -> Tuple[Set[str], Set[str], bool]:
        result = self.search.compute_visibility(self.tree, event.term)
        changed_visibility = self.tree.apply_visibility(result.visible, result.term)
        changed_marks = self.visibility.recalculate(self.tree)
        logger.debug(
            "Search '%s' on '%s': %d visibility changes, %d parents recalculated",
            result.term, self.container_id, len(changed_visibility), len(changed_marks),
        )
        return changed_marks, changed_visibility, result.has_results

    def _delta(self, changed_marks: Iterable[str], changed_visibility: Iterable[str] = (),
               has_results: Optional[bool] = None) -> StateDelta:
        return StateDelta(
            marks={node_id: self.tree.get_mark(node_id) for node_id in changed_marks},
            visibility={node_id: self.tree.is_visible(node_id) for node_id in changed_visibility},
            header=self.header_state(),
            has_results=has_results,
            show_navigator=self.mode.is_multi and self.selection_count() >= 2,
        )

    # ------------------------------------------------------------------
    # Read / write API
    # ------------------------------------------------------------------
    def get_selection(self) -> SelectionResult:
        return self.selection.get_selection(self.tree)

    def set_selection(self, selections: Optional[Mapping[str, Iterable[Identifier]]] = None) -> StateDelta:
        """Replace the selection by caller ids and return the resulting delta."""
        changed = self.selection.set_selection(self.tree, selections)
        return self._delta(changed)

    def clear(self) -> StateDelta:
        return self.apply_toggle(ToggleEvent.clear())

    def selection_count(self) -> int:
        return self.selection.selection_count(self.tree)

    def header_state(self) -> HeaderState:
        return self.display.header_state(self.get_selection(), self.placeholder)

    def summary(self) -> str:
        """Multi-line selection summary (used by the demo preview pane)."""
        return self.display.summarize(self.get_selection())

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def selection_targets(self) -> List[str]:
        """Node ids the "next selection" navigator cycles through, in data order."""
        if not self.mode.is_multi:
            node = self.selection.strategy.selected_node(self.tree)
            return [node.node_id] if node is not None else []

        targets: List[str] = []
        for parent in self.tree.parents():
            if self.tree.is_checked(parent.node_id):
                targets.append(parent.node_id)
            elif any(self.tree.is_checked(c.node_id) for c in self.tree.children_of(parent.node_id)):
                targets.append(parent.node_id)
        return targets

    def next_selection(self, after: Optional[str] = None) -> Optional[str]:
        """Return the target following ``after``, wrapping around; None when nothing is selected."""
        targets = self.selection_targets()
        if not targets:
            return None
        if after is None or after not in targets:
            return targets[0]
        return targets[(targets.index(after) + 1) % len(targets)]
