from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional


class SearchWidget(ttk.Frame):
    """Search entry with a clear button, reporting every term change.

    Parameters
    ----------
    master : tk.Widget
        Parent Tkinter widget.
    on_term_changed : Optional[Callable[[str], None]], optional
        Callback invoked when the search term changes. Identical repeated
        values are not re-notified.
    placeholder : str, optional
        Hint shown next to the entry.

    Notes
    -----
    - Escape and the clear button (×) empty the term and always notify ``""``.
    - Callbacks are invoked inside try/except blocks to avoid raising into
      the Tkinter mainloop.
    """

    def __init__(
        self,
        master: "tk.Widget",
        *,
        on_term_changed: Optional[Callable[[str], None]] = None,
        placeholder: str = "",
    ) -> None:
        super().__init__(master)
        self._on_term_changed = on_term_changed

        self._term_var = tk.StringVar(value="")
        self._last_notified_term: Optional[str] = None

        # Layout: Hint | Entry | Clear
        self.columnconfigure(1, weight=1)
        self._hint = ttk.Label(self, text=placeholder)
        self._hint.grid(row=0, column=0, padx=(0, 4), sticky="w")
        self._entry = ttk.Entry(self, textvariable=self._term_var)
        self._entry.grid(row=0, column=1, padx=(0, 4), sticky="ew")
        self._clear_btn = ttk.Button(self, text="×", width=2, command=self.clear)
        self._clear_btn.grid(row=0, column=2, sticky="nsew")

        self._term_var.trace_add("write", self._on_term_var_changed)
        self._entry.bind("<Escape>", self._on_escape, add="+")

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def set_search_term(self, term: str) -> None:
        self._term_var.set(term or "")

    def get_search_term(self) -> str:
        try:
            return self._term_var.get()
        except tk.TclError:
            return ""

    def clear(self) -> None:
        """Empty the term and notify ``""`` even if it was already empty."""
        self.set_search_term("")
        self._last_notified_term = None
        self._maybe_notify_term_changed()

    def focus_entry(self) -> None:
        self._entry.focus_set()
        self._entry.icursor("end")

    # ---------------------------------------------------------------------
    # Internal helpers and handlers
    # ---------------------------------------------------------------------
    def _maybe_notify_term_changed(self) -> None:
        if self._on_term_changed is None:
            return
        term = self.get_search_term()
        if term == self._last_notified_term:
            return
        self._last_notified_term = term
        try:
            self._on_term_changed(term)
        except Exception:
            # Keep the Tk mainloop alive
            pass

    def _on_term_var_changed(self, *args) -> None:
        self._maybe_notify_term_changed()

    def _on_escape(self, event: tk.Event) -> str:
        self.clear()
        return "break"
