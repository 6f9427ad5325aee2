import tkinter as tk

import pytest

from treeselect_toolkit.core.models import SelectionMode
from treeselect_toolkit.core.models.events import ToggleEvent
from treeselect_toolkit.ui.widgets.selection_tree_widget import SelectionTreeWidget


def _can_create_tk_root() -> bool:
    try:
        r = tk.Tk()
        r.destroy()
        return True
    except tk.TclError:
        return False


pytestmark = pytest.mark.skipif(
    not _can_create_tk_root(),
    reason="Tkinter root cannot be created in this environment (likely headless CI without display).",
)


@pytest.fixture
def tk_root():
    root = tk.Tk()
    root.withdraw()
    yield root
    root.destroy()


def test_render_shows_rows_with_glyphs(tk_root, make_control):
    control = make_control(SelectionMode.MULTI_TREE)
    widget = SelectionTreeWidget(tk_root)

    widget.render(control.tree)

    assert widget.visible_rows() == [n.node_id for n in control.tree.all_nodes()]
    assert widget.row_text("box-1") == "☐ North"


def test_apply_delta_updates_marks(tk_root, make_control):
    control = make_control(SelectionMode.MULTI_TREE)
    widget = SelectionTreeWidget(tk_root)
    widget.render(control.tree)

    widget.apply_delta(control.apply_toggle(ToggleEvent.child_toggled("box-1-101", True)))

    assert widget.row_text("box-1-101") == "☑ Oslo"
    assert widget.row_text("box-1") == "▣ North"


def test_hidden_rows_come_back_in_order(tk_root, make_control):
    control = make_control(SelectionMode.MULTI_TREE)
    widget = SelectionTreeWidget(tk_root)
    widget.render(control.tree)

    widget.apply_delta(control.apply_toggle(ToggleEvent.search_changed("naples")))
    assert widget.visible_rows() == ["box-2", "box-2-202"]

    widget.apply_delta(control.apply_toggle(ToggleEvent.search_changed("")))
    assert widget.visible_rows() == [n.node_id for n in control.tree.all_nodes()]


def test_single_mode_uses_radio_glyphs(tk_root, make_control):
    control = make_control(SelectionMode.SINGLE_FLAT)
    widget = SelectionTreeWidget(tk_root)
    widget.render(control.tree)

    widget.apply_delta(control.apply_toggle(ToggleEvent.option_selected("box-2")))

    assert widget.row_text("box-2") == "● South"
    assert widget.row_text("box-1") == "○ North"


def test_activation_callback_receives_node_id(tk_root, make_control):
    activated = []
    control = make_control(SelectionMode.MULTI_TREE)
    widget = SelectionTreeWidget(tk_root, on_node_activated=activated.append)
    widget.render(control.tree)

    widget.focus_node("box-2-201")
    widget._on_key_activate(None)

    assert activated == ["box-2-201"]


def test_failing_activation_callback_is_logged(tk_root, make_control, caplog):
    def broken(node_id):
        raise RuntimeError("handler exploded")

    control = make_control(SelectionMode.MULTI_TREE)
    widget = SelectionTreeWidget(tk_root, on_node_activated=broken)
    widget.render(control.tree)
    widget.focus_node("box-1")

    assert widget._on_key_activate(None) == "break"
    assert "Node activation handler failed for 'box-1'" in caplog.text
    assert "handler exploded" in caplog.text
