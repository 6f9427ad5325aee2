import logging

from treeselect_toolkit.core.models import Mark, SelectionMode
from treeselect_toolkit.core.services.bulk_toggle_service import BulkToggleService
from treeselect_toolkit.core.services.search_service import SearchService
from treeselect_toolkit.core.services.visibility_service import VisibilityService


def _filter(tree, term):
    result = SearchService().compute_visibility(tree, term)
    tree.apply_visibility(result.visible, result.term)


def test_select_all_without_filter_checks_everything(make_tree):
    tree = make_tree()

    BulkToggleService().toggle_all(tree, True)

    assert all(tree.is_checked(n.node_id) for n in tree.all_nodes())


def test_clear_all_resets_indeterminate_parents(make_tree):
    tree = make_tree()
    tree.set_mark("box-1", Mark.INDETERMINATE)
    tree.set_mark("box-1-101", Mark.CHECKED)

    changed = BulkToggleService().toggle_all(tree, False)

    assert changed == {"box-1", "box-1-101"}
    assert all(tree.get_mark(n.node_id) is Mark.UNCHECKED for n in tree.all_nodes())


def test_select_all_with_filter_only_touches_visible_nodes(make_tree):
    # Filter hides parent North and its children
    tree = make_tree()
    _filter(tree, "south")

    BulkToggleService().toggle_all(tree, True, respect_search=True)

    assert tree.get_mark("box-1") is Mark.UNCHECKED
    assert not any(tree.is_checked(c.node_id) for c in tree.children_of("box-1"))
    assert tree.get_mark("box-2") is Mark.CHECKED
    assert all(tree.is_checked(c.node_id) for c in tree.children_of("box-2"))


def test_select_all_in_flat_mode_with_filter(make_tree):
    tree = make_tree(SelectionMode.MULTI_FLAT)
    _filter(tree, "south")

    BulkToggleService().toggle_all(tree, True)

    assert [n.node_id for n in tree.checked_nodes()] == ["box-2"]


def test_respect_search_false_ignores_filter(make_tree):
    tree = make_tree()
    _filter(tree, "south")

    BulkToggleService().toggle_all(tree, True, respect_search=False)

    assert all(tree.is_checked(n.node_id) for n in tree.all_nodes())


def test_select_all_with_partial_child_match(make_tree):
    # "rome" matches one child only; South stays visible because of it
    tree = make_tree()
    _filter(tree, "rome")

    BulkToggleService().toggle_all(tree, True)

    assert tree.is_checked("box-2-201")
    assert not tree.is_checked("box-2-202")
    assert tree.get_mark("box-2") is Mark.CHECKED


def test_clear_all_with_filter_keeps_hidden_selection(make_tree):
    tree = make_tree()
    BulkToggleService().toggle_all(tree, True)
    _filter(tree, "rome")

    BulkToggleService().toggle_all(tree, False)

    assert not tree.is_checked("box-2-201")
    assert tree.is_checked("box-2-202")
    assert tree.is_checked("box-1-101")
    assert tree.get_mark("box-2") is Mark.UNCHECKED

    # Clearing the filter re-derives the parent from all of its children
    _filter(tree, "")
    VisibilityService().recalculate(tree)
    assert tree.get_mark("box-2") is Mark.INDETERMINATE
    assert tree.get_mark("box-1") is Mark.CHECKED


def test_bulk_toggle_logs_scope(make_tree, caplog):
    tree = make_tree()
    _filter(tree, "south")

    with caplog.at_level(logging.INFO, logger="treeselect_toolkit.core.services.bulk_toggle_service"):
        BulkToggleService().toggle_all(tree, True)

    assert "Select All executed for box - visible items only" in caplog.text


def test_toggle_all_is_idempotent(make_tree):
    tree = make_tree()
    svc = BulkToggleService()
    svc.toggle_all(tree, True)
    before = tree.marks()

    assert svc.toggle_all(tree, True) == set()
    assert tree.marks() == before
