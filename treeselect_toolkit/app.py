# -*- coding: utf-8 -*-
"""Tk demo front-end for the TreeSelect Toolkit.

Shows the five canonical control configurations from ``demo.yml`` side by
side. Exposes the :class:`TreeSelectDemo` widget, which is instantiated by
``run.py``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import tkinter as tk
from tkinter import ttk

from treeselect_toolkit.config import ConfigManager
from treeselect_toolkit.core.control import SelectionControl
from treeselect_toolkit.core.models import HeaderState
from treeselect_toolkit.core.registry import ControlRegistry
from treeselect_toolkit.ui.controllers.selection_controller import SelectionController
from treeselect_toolkit.ui.coordinators.search_coordinator import SearchCoordinator
from treeselect_toolkit.ui.widgets.search_widget import SearchWidget
from treeselect_toolkit.ui.widgets.selection_tree_widget import SelectionTreeWidget
from treeselect_toolkit.ui.widgets.tooltip import Tooltip
from treeselect_toolkit.version import get_app_version

logger = logging.getLogger(__name__)

__all__ = ["SelectionPanel", "TreeSelectDemo"]


class SelectionPanel(ttk.LabelFrame):
    """One dropdown-like control: header, optional search and bulk buttons, tree."""

    def __init__(self, master: tk.Widget, label: str) -> None:
        super().__init__(master, text=label, padding=6)
        self.controller: Optional[SelectionController] = None
        self.coordinator: Optional[SearchCoordinator] = None
        self._expanded = True
        self._nav_btn: Optional[ttk.Button] = None
        self.nav_tooltip: Optional[Tooltip] = None
        self.columnconfigure(0, weight=1)

    def attach(self, control: SelectionControl, texts: Dict[str, Any]) -> None:
        """Build the widgets for ``control`` once the registry created it."""
        self.controller = SelectionController(control)
        buttons = texts.get("buttons") or {}
        flags = control.config.flags

        header = ttk.Frame(self)
        header.grid(row=0, column=0, sticky="ew")
        header.columnconfigure(0, weight=1)
        self._header_var = tk.StringVar(value=control.placeholder)
        self._header_label = ttk.Label(header, textvariable=self._header_var, anchor="w")
        self._header_label.grid(row=0, column=0, sticky="ew")
        self._nav_btn = ttk.Button(header, text="⇣", width=3, command=self._on_next_selection)
        self._nav_btn.grid(row=0, column=1, padx=(4, 0))
        self.nav_tooltip = Tooltip(self._nav_btn, text=str(buttons.get("next_selection", "Go to next selection")))
        self._nav_btn.grid_remove()
        ttk.Button(header, text="▾", width=3, command=self.toggle_expanded).grid(row=0, column=2, padx=(4, 0))

        self._body = ttk.Frame(self)
        self._body.grid(row=1, column=0, sticky="nsew", pady=(4, 0))
        self._body.columnconfigure(0, weight=1)
        row = 0

        self._tree_widget = SelectionTreeWidget(self._body, on_node_activated=self._on_node_activated, height=8)
        self.coordinator = SearchCoordinator(
            controller_getter=lambda: self.controller,
            tree=self._tree_widget,
            update_header=self._set_header,
            show_no_results=self._set_no_results,
            update_navigator=self._set_navigator,
        )

        if flags.search:
            search = SearchWidget(
                self._body,
                on_term_changed=self.coordinator.term_changed,
                placeholder=str(texts.get("search_placeholder", "")),
            )
            search.grid(row=row, column=0, sticky="ew", pady=(0, 4))
            row += 1

        if flags.show_select_all or flags.show_clear_all:
            actions = ttk.Frame(self._body)
            actions.grid(row=row, column=0, sticky="w", pady=(0, 4))
            if flags.show_select_all:
                ttk.Button(actions, text=buttons.get("select_all", "Select all"),
                           command=self._on_select_all).pack(side="left", padx=(0, 4))
            if flags.show_clear_all:
                ttk.Button(actions, text=buttons.get("clear_all", "Clear all"),
                           command=self._on_clear_all).pack(side="left")
            row += 1

        self._tree_widget.grid(row=row, column=0, sticky="nsew")
        self._body.rowconfigure(row, weight=1)
        row += 1

        self._no_results = ttk.Label(self._body, text=str(texts.get("no_results_text", "No results found")),
                                     foreground="#808080")
        self._no_results.grid(row=row, column=0, sticky="w")
        self._no_results.grid_remove()

        self._tree_widget.render(control.tree)

    # ------------------------------------------------------------------
    def toggle_expanded(self) -> None:
        self._expanded = not self._expanded
        if self._expanded:
            self._body.grid()
        else:
            self._body.grid_remove()

    def _set_header(self, header: Optional[HeaderState]) -> None:
        if header is None:
            return
        self._header_var.set(header.text)

    def _set_no_results(self, show: bool) -> None:
        if show:
            self._no_results.grid()
        else:
            self._no_results.grid_remove()

    def _set_navigator(self, show: bool) -> None:
        if self._nav_btn is None:
            return
        if show:
            self._nav_btn.grid()
        else:
            self._nav_btn.grid_remove()

    def _apply(self, delta) -> None:
        if self.coordinator is not None:
            self.coordinator.selection_changed(delta)

    def _on_node_activated(self, node_id: str) -> None:
        if self.controller is None:
            return
        self._apply(self.controller.handle_node_activated(node_id))

    def _on_select_all(self) -> None:
        if self.controller is not None:
            self._apply(self.controller.handle_select_all())

    def _on_clear_all(self) -> None:
        if self.controller is not None:
            self._apply(self.controller.handle_clear_all())

    def _on_next_selection(self) -> None:
        if self.coordinator is not None:
            self.coordinator.navigate_next()


class TreeSelectDemo:
    """Main demo widget: one :class:`SelectionPanel` per configured control."""

    def __init__(self, root: tk.Tk) -> None:
        self.root = root
        self.config_manager = ConfigManager()
        self.panels: Dict[str, SelectionPanel] = {}
        self.registry = ControlRegistry(container_resolver=self.panels.get)

        self._build_ui()
        self._create_controls()

    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        self.root.title(f"TreeSelect Toolkit {get_app_version()}")
        main = ttk.Frame(self.root, padding=10)
        main.pack(fill="both", expand=True)
        main.columnconfigure(0, weight=1)
        main.columnconfigure(1, weight=1)
        self._main = main

        bottom = ttk.Frame(main)
        bottom.grid(row=10, column=0, columnspan=2, sticky="nsew", pady=(8, 0))
        bottom.columnconfigure(0, weight=1)
        ttk.Button(bottom, text="Show selections", command=self.show_selections).grid(row=0, column=0, sticky="w")
        self._output = tk.Text(bottom, height=8, wrap="word")
        self._output.grid(row=1, column=0, sticky="nsew", pady=(4, 0))

    def _create_controls(self) -> None:
        demo = self.config_manager.get_demo_config()
        data: List[Any] = demo.get("data") or []
        texts = self.config_manager.get_control_defaults()

        for index, params in enumerate(demo.get("controls") or []):
            container_id = str(params.get("containerId", ""))
            panel = SelectionPanel(self._main, str(params.get("label") or container_id))
            self.panels[container_id] = panel

            control = self.registry.initialize({**params, "data": data})
            if control is None:
                # Registry already logged the configuration error
                panel.destroy()
                self.panels.pop(container_id, None)
                continue
            panel.attach(control, texts)
            panel.grid(row=index // 2, column=index % 2, sticky="nsew", padx=4, pady=4)

        logger.info("Demo started with %d controls", len(self.panels))

    def show_selections(self) -> None:
        """Dump ``get_selection`` of every control into the output pane."""
        lines = []
        for container_id in self.registry.container_ids():
            result = self.registry.get_selection(container_id)
            lines.append(f"{container_id}: {json.dumps(result.to_dict(), ensure_ascii=False)}")
            control = self.registry.get_control(container_id)
            if control is not None and result.has_data:
                lines.append(control.summary())
        self._output.delete("1.0", "end")
        self._output.insert("1.0", "\n".join(lines))
