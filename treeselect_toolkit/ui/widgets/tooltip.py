from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Optional


class Tooltip:
    """Hover hint for a small ttk widget (icon buttons such as the navigator).

    Usage::

        Tooltip(button, text="Go to next selection")

    The hint appears after ``delay_ms`` near the pointer and is removed on
    leave. Tk failures never propagate to the caller.
    """

    def __init__(self, widget: tk.Widget, text: str = "", *, delay_ms: int = 600) -> None:
        self.widget = widget
        self.text = text
        self._delay_ms = max(0, int(delay_ms))
        self._window: Optional[tk.Toplevel] = None
        self._after_id: Optional[str] = None
        try:
            self.widget.bind("<Enter>", self._schedule, add="+")
            self.widget.bind("<Leave>", self._on_leave, add="+")
        except tk.TclError:
            pass

    @property
    def visible(self) -> bool:
        return self._window is not None

    def _schedule(self, _event: Optional[tk.Event] = None) -> None:
        self._cancel()
        try:
            self._after_id = self.widget.after(self._delay_ms, self.show)
        except tk.TclError:
            self._after_id = None

    def _on_leave(self, _event: Optional[tk.Event] = None) -> None:
        self._cancel()
        self.hide()

    def show(self) -> None:
        if self._window is not None or not self.text:
            return
        self._after_id = None
        try:
            self._window = tk.Toplevel(self.widget)
            self._window.wm_overrideredirect(True)
            x = self.widget.winfo_pointerx() + 12
            y = self.widget.winfo_pointery() + 12
            self._window.geometry(f"+{x}+{y}")
            ttk.Label(self._window, text=self.text, padding=(6, 3)).pack()
        except tk.TclError:
            self.hide()

    def hide(self) -> None:
        window, self._window = self._window, None
        if window is None:
            return
        try:
            window.destroy()
        except tk.TclError:
            pass

    def _cancel(self) -> None:
        after_id, self._after_id = self._after_id, None
        if after_id is None:
            return
        try:
            self.widget.after_cancel(after_id)
        except tk.TclError:
            pass
