from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk
from typing import Callable, Dict, List, Optional

from treeselect_toolkit.core.models import Mark, StateDelta
from treeselect_toolkit.core.state import SelectionTree

logger = logging.getLogger(__name__)

# Checkbox glyphs for multi-select modes, radio glyphs for single-select modes
CHECK_GLYPHS: Dict[Mark, str] = {
    Mark.UNCHECKED: "☐",
    Mark.CHECKED: "☑",
    Mark.INDETERMINATE: "▣",
}
RADIO_GLYPHS: Dict[Mark, str] = {
    Mark.UNCHECKED: "○",
    Mark.CHECKED: "●",
    Mark.INDETERMINATE: "○",
}


class SelectionTreeWidget(ttk.Frame):
    """Tkinter widget rendering the nodes and marks of a :class:`SelectionTree`.

    This widget only reflects engine state: it never decides a mark itself.
    Clicks are reported through ``on_node_activated`` and the host applies the
    resulting :class:`StateDelta` back with :meth:`apply_delta`.

    Callbacks:
        - on_node_activated: Invoked on click, Space or Return with the node id
          of the focused row.

    Notes
    -----
    - Treeview item ids are the engine node ids, so duplicate composite ids
      still map to distinct rows.
    - Hidden nodes are detached from the Treeview and re-attached at their
      original position when they become visible again.
    - UI-only: no I/O. Failing callbacks are logged and never reach the Tk mainloop.
    """

    def __init__(
        self,
        master: "tk.Widget",
        *,
        on_node_activated: Optional[Callable[[str], None]] = None,
        height: int = 10,
    ) -> None:
        super().__init__(master)
        self._on_node_activated = on_node_activated

        self._state: Optional[SelectionTree] = None
        self._glyphs: Dict[Mark, str] = CHECK_GLYPHS

        self._tree = ttk.Treeview(self, show="tree", selectmode="browse", height=height)
        self._vsb = ttk.Scrollbar(self, orient="vertical", command=self._tree.yview)
        self._tree.configure(yscrollcommand=self._vsb.set)
        self._tree.grid(row=0, column=0, sticky="nsew")
        self._vsb.grid(row=0, column=1, sticky="ns")
        self.columnconfigure(0, weight=1)
        self.rowconfigure(0, weight=1)

        try:
            self._tree.tag_configure("group", foreground="#808080")
            self._tree.tag_configure("checked", foreground="#0098e4")
        except Exception:
            pass

        self._tree.bind("<ButtonRelease-1>", self._on_click, add="+")
        self._tree.bind("<space>", self._on_key_activate, add="+")
        self._tree.bind("<Return>", self._on_key_activate, add="+")

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def render(self, state: SelectionTree) -> None:
        """Rebuild every row from ``state`` (marks and visibility included)."""
        self._state = state
        self._glyphs = CHECK_GLYPHS if state.mode.is_multi else RADIO_GLYPHS
        self._tree.delete(*self._tree.get_children(""))

        for parent in state.parents():
            tags = ("group",) if not state.mode.is_multi and parent.has_children() else ()
            self._tree.insert("", "end", iid=parent.node_id, text=self._label(parent.node_id), open=True, tags=tags)
            for child in state.children_of(parent.node_id):
                self._tree.insert(parent.node_id, "end", iid=child.node_id, text=self._label(child.node_id))

        for node in state.all_nodes():
            self._refresh_tags(node.node_id)
        self._sync_visibility()

    def apply_delta(self, delta: StateDelta) -> None:
        """Reflect the marks and visibility changed by one engine call."""
        if self._state is None:
            return
        for node_id in delta.marks:
            if self._tree.exists(node_id):
                self._tree.item(node_id, text=self._label(node_id))
                self._refresh_tags(node_id)
        if delta.visibility:
            self._sync_visibility()

    def focus_node(self, node_id: Optional[str]) -> None:
        """Scroll to ``node_id`` and highlight it (used by the selection navigator)."""
        if not node_id or not self._tree.exists(node_id):
            return
        try:
            self._tree.see(node_id)
            self._tree.selection_set(node_id)
            self._tree.focus(node_id)
        except tk.TclError:
            pass

    def row_text(self, node_id: str) -> str:
        return str(self._tree.item(node_id, "text")) if self._tree.exists(node_id) else ""

    def visible_rows(self) -> List[str]:
        """Node ids currently attached, in display order."""
        rows: List[str] = []
        for parent_iid in self._tree.get_children(""):
            rows.append(parent_iid)
            rows.extend(self._tree.get_children(parent_iid))
        return rows

    # ---------------------------------------------------------------------
    # Internal helpers and handlers
    # ---------------------------------------------------------------------
    def _label(self, node_id: str) -> str:
        if self._state is None:
            return node_id
        node = self._state.node(node_id)
        name = node.name if node is not None else node_id
        return f"{self._glyphs[self._state.get_mark(node_id)]} {name}"

    def _refresh_tags(self, node_id: str) -> None:
        if self._state is None:
            return
        tags = [t for t in self._tree.item(node_id, "tags") or () if t != "checked"]
        if self._state.is_checked(node_id):
            tags.append("checked")
        self._tree.item(node_id, tags=tuple(tags))

    def _sync_visibility(self) -> None:
        # Detached rows are re-attached at their data-order index among visible siblings
        if self._state is None:
            return
        p_index = 0
        for parent in self._state.parents():
            if self._state.is_visible(parent.node_id):
                self._tree.move(parent.node_id, "", p_index)
                p_index += 1
            else:
                self._tree.detach(parent.node_id)
            c_index = 0
            for child in self._state.children_of(parent.node_id):
                if self._state.is_visible(child.node_id):
                    self._tree.move(child.node_id, parent.node_id, c_index)
                    c_index += 1
                else:
                    self._tree.detach(child.node_id)

    def _activate(self, node_id: str) -> None:
        if self._on_node_activated is None or not node_id:
            return
        try:
            self._on_node_activated(node_id)
        except Exception:
            logger.exception("Node activation handler failed for '%s'", node_id)

    def _on_click(self, event: tk.Event) -> None:
        # Ignore clicks on the expand/collapse indicator
        if self._tree.identify_element(event.x, event.y) == "Treeitem.indicator":
            return
        self._activate(self._tree.identify_row(event.y))

    def _on_key_activate(self, event: tk.Event) -> str:
        self._activate(self._tree.focus())
        return "break"
