from treeselect_toolkit.core.models import HeaderState, Mark, SelectionMode, StateDelta
from treeselect_toolkit.ui.controllers.selection_controller import SelectionController
from treeselect_toolkit.ui.coordinators.search_coordinator import SearchCoordinator


class FakeTree:
    def __init__(self):
        self.deltas = []
        self.focused = []

    def apply_delta(self, delta):
        self.deltas.append(delta)

    def focus_node(self, node_id):
        self.focused.append(node_id)


class FakePanel:
    def __init__(self):
        self.headers = []
        self.no_results = []
        self.navigator = []

    def update_header(self, header):
        self.headers.append(header)

    def show_no_results(self, show):
        self.no_results.append(show)

    def update_navigator(self, show):
        self.navigator.append(show)


def _coordinator(ctrl, tree, panel):
    return SearchCoordinator(
        controller_getter=lambda: ctrl,
        tree=tree,
        update_header=panel.update_header,
        show_no_results=panel.show_no_results,
        update_navigator=panel.update_navigator,
    )


def test_term_changed_applies_visibility_and_no_results(make_control):
    ctrl = SelectionController(make_control(SelectionMode.MULTI_TREE))
    tree, panel = FakeTree(), FakePanel()
    sc = _coordinator(ctrl, tree, panel)

    sc.term_changed("zzz")

    assert len(tree.deltas) == 1
    assert tree.deltas[0].visibility["box-1"] is False
    assert panel.no_results == [True]
    # No mark changed, the header stays as it was
    assert panel.headers == []

    sc.term_changed("")
    assert panel.no_results == [True, False]


def test_term_changed_refreshes_header_when_parents_are_recalculated(make_control):
    ctrl = SelectionController(make_control(SelectionMode.MULTI_TREE))
    ctrl.handle_search("oslo")
    ctrl.handle_parent_toggle("box-1", True)
    tree, panel = FakeTree(), FakePanel()
    sc = _coordinator(ctrl, tree, panel)

    sc.term_changed("")

    assert tree.deltas[-1].marks == {"box-1": Mark.INDETERMINATE}
    assert panel.headers[-1] == HeaderState(text="North ← Oslo", has_selections=True)
    assert panel.navigator == [False]


def test_navigate_next_focuses_target(make_control):
    ctrl = SelectionController(make_control(SelectionMode.MULTI_TREE))
    ctrl.set_selection({"parents": [2], "children": [101]})
    tree, panel = FakeTree(), FakePanel()
    sc = _coordinator(ctrl, tree, panel)

    assert sc.navigate_next() == "box-1"
    assert sc.navigate_next() == "box-2"
    assert tree.focused == ["box-1", "box-2"]


def test_selection_changed_updates_header_and_navigator(make_control):
    ctrl = SelectionController(make_control(SelectionMode.MULTI_TREE))
    tree, panel = FakeTree(), FakePanel()
    sc = _coordinator(ctrl, tree, panel)

    sc.selection_changed(ctrl.handle_parent_toggle("box-2", True))

    assert panel.headers[-1].text == "South ← Rome, Naples, Bari"
    assert panel.navigator == [True]


def test_missing_controller_is_a_no_op():
    tree, panel = FakeTree(), FakePanel()
    sc = SearchCoordinator(
        controller_getter=lambda: None,
        tree=tree,
        update_header=panel.update_header,
        show_no_results=panel.show_no_results,
    )

    sc.term_changed("x")

    assert sc.navigate_next() is None
    assert tree.deltas == [] and panel.no_results == []


def test_widget_failures_are_contained(make_control, caplog):
    class BrokenTree(FakeTree):
        def apply_delta(self, delta):
            raise RuntimeError("tk gone")

    ctrl = SelectionController(make_control(SelectionMode.MULTI_TREE))
    panel = FakePanel()
    sc = _coordinator(ctrl, BrokenTree(), panel)

    sc.term_changed("zzz")
    sc.selection_changed(StateDelta())

    assert panel.no_results == [True]
    assert "tk gone" in caplog.text
