"""Human-readable summaries of a selection result (header / preview text)."""

from __future__ import annotations

from typing import Any, Dict, Optional

from treeselect_toolkit.core.models import HeaderState, SelectionMode, SelectionResult

__all__ = ["DisplayTextService"]

_DEFAULT_TREE_SEPARATOR = " ← "
_DEFAULT_ITEM_SEPARATOR = ", "


class DisplayTextService:
    """Turn a :class:`SelectionResult` into summary and header strings.

    Parameters
    ----------
    display_config : dict, optional
        ``tree_separator`` (between a parent and its children) and
        ``item_separator`` (between names) as loaded from configuration.
    """

    def __init__(self, display_config: Optional[Dict[str, Any]] = None) -> None:
        cfg = display_config or {}
        self.tree_separator: str = str(cfg.get("tree_separator", _DEFAULT_TREE_SEPARATOR))
        self.item_separator: str = str(cfg.get("item_separator", _DEFAULT_ITEM_SEPARATOR))

    def summarize(self, result: SelectionResult) -> str:
        """Return the multi-line summary of ``result`` (empty string if nothing is selected).

        multi-tree prints one ``Parent ← child1, child2`` line per entry,
        multi-flat joins the names, single-tree prints ``Parent ← Child``.
        """
        if not result.has_data:
            return ""

        if result.mode is SelectionMode.MULTI_TREE:
            lines = []
            for item in result.items:
                if item.children:
                    names = self.item_separator.join(child.name for child in item.children)
                    lines.append(f"{item.name}{self.tree_separator}{names}")
                else:
                    lines.append(item.name)
            return "\n".join(lines)

        if result.mode is SelectionMode.MULTI_FLAT:
            return self.item_separator.join(item.name for item in result.items)

        item = result.items[0]
        if result.mode is SelectionMode.SINGLE_TREE and item.parent is not None and item.parent.name:
            return f"{item.parent.name}{self.tree_separator}{item.name}"
        return item.name

    def header_state(self, result: SelectionResult, placeholder: str) -> HeaderState:
        """Single-line header text; falls back to ``placeholder`` when nothing is selected."""
        text = self.summarize(result)
        if text.strip():
            return HeaderState(text=text.replace("\n", self.item_separator), has_selections=True)
        return HeaderState(text=placeholder, has_selections=False)
