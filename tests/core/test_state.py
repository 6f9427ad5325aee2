import logging

from treeselect_toolkit.core.models import Item, Mark, SelectionMode


# ---------------------------
# Construction
# ---------------------------

def test_build_creates_parents_and_children_in_tree_mode(make_tree):
    tree = make_tree(SelectionMode.MULTI_TREE)

    assert [p.node_id for p in tree.parents()] == ["box-1", "box-2", "box-3"]
    assert [c.node_id for c in tree.children_of("box-1")] == ["box-1-101", "box-1-102"]
    assert len(tree) == 3 + 5
    assert all(tree.get_mark(n.node_id) is Mark.UNCHECKED for n in tree.all_nodes())
    assert all(tree.is_visible(n.node_id) for n in tree.all_nodes())
    assert tree.search_active is False


def test_flat_modes_do_not_materialize_children(make_tree):
    tree = make_tree(SelectionMode.MULTI_FLAT)

    assert len(tree) == 3
    assert tree.children_of("box-1") == []
    assert tree.find_children(101) == []


def test_duplicate_parent_ids_render_independently(make_tree, caplog):
    data = [{"id": 1, "name": "A"}, {"id": 1, "name": "A again"}]

    with caplog.at_level(logging.WARNING):
        tree = make_tree(SelectionMode.MULTI_FLAT, data)

    assert [p.node_id for p in tree.parents()] == ["box-1", "box-1#2"]
    assert [p.composite_id for p in tree.parents()] == ["box-1", "box-1"]
    assert len(tree.render_pass.duplicates) == 1
    assert "Duplicate id" in caplog.text

    tree.set_mark("box-1#2", Mark.CHECKED)
    assert tree.get_mark("box-1") is Mark.UNCHECKED


def test_rebuild_resets_marks_and_duplicates(make_tree):
    tree = make_tree(SelectionMode.MULTI_FLAT, [{"id": 1, "name": "A"}, {"id": 1, "name": "B"}])
    tree.set_mark("box-1", Mark.CHECKED)

    tree.build([Item(id=1, name="A")])

    assert tree.get_mark("box-1") is Mark.UNCHECKED
    assert tree.render_pass.duplicates == []


# ---------------------------
# Lookups
# ---------------------------

def test_identifiers_compare_by_string_form(make_tree):
    tree = make_tree()

    assert [n.node_id for n in tree.find_parents("1")] == ["box-1"]
    assert [n.node_id for n in tree.find_children(101)] == ["box-1-101"]
    assert tree.parent_of("box-2-203").node_id == "box-2"
    assert tree.parent_of("box-2") is None


def test_original_identifier_type_is_preserved(make_tree):
    tree = make_tree(data=[{"id": "a", "name": "A"}, {"id": 7, "name": "B"}])

    assert tree.node("box-a").id == "a"
    assert tree.node("box-7").id == 7


# ---------------------------
# Marks and visibility
# ---------------------------

def test_set_mark_refuses_indeterminate_child(make_tree, caplog):
    tree = make_tree()

    with caplog.at_level(logging.WARNING):
        changed = tree.set_mark("box-1-101", Mark.INDETERMINATE)

    assert changed is False
    assert tree.get_mark("box-1-101") is Mark.UNCHECKED
    assert "indeterminate" in caplog.text


def test_set_mark_on_unknown_node_is_a_no_op(make_tree):
    tree = make_tree()
    assert tree.set_mark("box-99", Mark.CHECKED) is False
    assert "box-99" not in tree


def test_clear_marks_returns_changed_nodes(make_tree):
    tree = make_tree()
    tree.set_mark("box-1", Mark.INDETERMINATE)
    tree.set_mark("box-1-101", Mark.CHECKED)

    assert tree.clear_marks() == {"box-1", "box-1-101"}
    assert tree.checked_nodes() == []


def test_apply_visibility_reports_changes_and_term(make_tree):
    tree = make_tree()

    changed = tree.apply_visibility({"box-1": False, "box-1-101": False, "box-2": True, "nope": False}, "  ro ")

    assert changed == {"box-1", "box-1-101"}
    assert tree.search_term == "ro"
    assert tree.search_active is True
    assert [c.node_id for c in tree.visible_children_of("box-1")] == ["box-1-102"]
