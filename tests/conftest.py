"""Shared fixtures for the TreeSelect Toolkit test-suite.

Trees are built for the container ``box`` so node ids read as
``box-<parent>`` and ``box-<parent>-<child>``.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from treeselect_toolkit.config import ConfigManager
from treeselect_toolkit.core.control import SelectionControl
from treeselect_toolkit.core.models import Item, SelectionMode
from treeselect_toolkit.core.models.control_config import ControlConfig, ControlFlags
from treeselect_toolkit.core.state import SelectionTree

CONTAINER = "box"

FLAGS_BY_MODE = {
    SelectionMode.SINGLE_FLAT: ControlFlags(),
    SelectionMode.SINGLE_TREE: ControlFlags(tree_view=True),
    SelectionMode.MULTI_FLAT: ControlFlags(multi_select=True),
    SelectionMode.MULTI_TREE: ControlFlags(multi_select=True, tree_view=True),
}


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Fresh ConfigManager per test, without user overrides from the real home."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
    ConfigManager.reset()
    yield
    ConfigManager.reset()


@pytest.fixture
def regions_data() -> List[Dict[str, Any]]:
    """Two parents with children plus one leaf parent."""
    return [
        {"id": 1, "name": "North", "children": [
            {"id": 101, "name": "Oslo"},
            {"id": 102, "name": "Bergen"},
        ]},
        {"id": 2, "name": "South", "children": [
            {"id": 201, "name": "Rome"},
            {"id": 202, "name": "Naples"},
            {"id": 203, "name": "Bari"},
        ]},
        {"id": 3, "name": "Islands"},
    ]


@pytest.fixture
def make_tree(regions_data):
    """Factory building a :class:`SelectionTree` for a mode (and optional data)."""

    def _make(mode: SelectionMode = SelectionMode.MULTI_TREE, data=None) -> SelectionTree:
        raw = regions_data if data is None else data
        items = [Item.from_dict(entry) for entry in raw]
        tree = SelectionTree(CONTAINER, mode)
        tree.build([item for item in items if item is not None])
        return tree

    return _make


@pytest.fixture
def make_control(regions_data):
    """Factory building a :class:`SelectionControl` for a mode (and optional data)."""

    def _make(mode: SelectionMode = SelectionMode.MULTI_TREE, data=None, placeholder: str = "Select...") -> SelectionControl:
        raw = regions_data if data is None else data
        items = [item for item in (Item.from_dict(entry) for entry in raw) if item is not None]
        config = ControlConfig(container_id=CONTAINER, placeholder=placeholder, data=items,
                               flags=FLAGS_BY_MODE[mode])
        return SelectionControl(config)

    return _make
