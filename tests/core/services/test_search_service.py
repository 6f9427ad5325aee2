import pytest

from treeselect_toolkit.core.models import SelectionMode
from treeselect_toolkit.core.services.search_service import SearchService


def _visible(tree, result):
    return [n.node_id for n in tree.all_nodes() if result.visible.get(n.node_id)]


def test_empty_term_shows_everything(make_tree):
    tree = make_tree()
    result = SearchService().compute_visibility(tree, "   ")

    assert result.term == ""
    assert result.has_results is True
    assert len(_visible(tree, result)) == len(tree)


def test_child_match_shows_its_parent_only(make_tree):
    tree = make_tree()
    result = SearchService().compute_visibility(tree, "NAP")

    assert _visible(tree, result) == ["box-2", "box-2-202"]
    assert result.term == "NAP"


def test_parent_match_shows_all_children(make_tree):
    tree = make_tree()
    result = SearchService().compute_visibility(tree, "north")

    assert _visible(tree, result) == ["box-1", "box-1-101", "box-1-102"]


def test_flat_mode_searches_parents_only(make_tree):
    tree = make_tree(SelectionMode.MULTI_FLAT)

    assert _visible(tree, SearchService().compute_visibility(tree, "isl")) == ["box-3"]
    assert SearchService().compute_visibility(tree, "oslo").has_results is False


@pytest.mark.parametrize("term", ["zzz", "Köln"])
def test_no_match_reports_no_results(make_tree, term):
    tree = make_tree()
    result = SearchService().compute_visibility(tree, term)

    assert result.has_results is False
    assert _visible(tree, result) == []


def test_matching_is_case_insensitive_for_unicode(make_tree):
    tree = make_tree(data=[{"id": 1, "name": "STRASSE", "children": [{"id": 2, "name": "Große"}]}])

    result = SearchService().compute_visibility(tree, "GROSSE")

    assert _visible(tree, result) == ["box-1", "box-1-2"]
