from treeselect_toolkit.core.models import Mark, SelectionMode
from treeselect_toolkit.core.services.visibility_service import VisibilityService


def test_recalculate_with_filter_uses_visible_children(make_tree):
    tree = make_tree()
    tree.set_mark("box-2-201", Mark.CHECKED)
    tree.set_mark("box-2", Mark.INDETERMINATE)
    tree.apply_visibility({"box-2-202": False, "box-2-203": False}, "rome")

    changed = VisibilityService().recalculate(tree)

    assert changed == {"box-2"}
    assert tree.get_mark("box-2") is Mark.CHECKED


def test_clearing_filter_restores_full_scope(make_tree):
    tree = make_tree()
    tree.set_mark("box-2-201", Mark.CHECKED)
    tree.set_mark("box-2", Mark.CHECKED)
    tree.apply_visibility({"box-2-202": True, "box-2-203": True}, "")

    VisibilityService().recalculate(tree)

    assert tree.get_mark("box-2") is Mark.INDETERMINATE


def test_hidden_checked_children_keep_parent(make_tree):
    tree = make_tree()
    tree.set_mark("box-1-102", Mark.CHECKED)
    tree.set_mark("box-1", Mark.INDETERMINATE)
    tree.apply_visibility({"box-1-102": False}, "oslo")

    changed = VisibilityService().recalculate(tree)

    assert "box-1" not in changed
    assert tree.get_mark("box-1") is Mark.INDETERMINATE


def test_recalculate_is_a_no_op_outside_multi_tree(make_tree):
    tree = make_tree(SelectionMode.SINGLE_TREE)
    tree.set_mark("box-1-101", Mark.CHECKED)

    assert VisibilityService().recalculate(tree) == set()
    assert tree.get_mark("box-1") is Mark.UNCHECKED


def test_leaf_parents_are_left_alone(make_tree):
    tree = make_tree()
    tree.set_mark("box-3", Mark.CHECKED)

    VisibilityService().recalculate(tree)

    assert tree.get_mark("box-3") is Mark.CHECKED
