import logging

import pytest

from treeselect_toolkit.config.manager import _get_user_config_dir
from treeselect_toolkit.core import registry as api
from treeselect_toolkit.core.models import Mark, SelectionMode
from treeselect_toolkit.core.registry import ControlRegistry


@pytest.fixture
def reg():
    return ControlRegistry()


@pytest.fixture
def params(regions_data):
    return {
        "containerId": "regions",
        "data": regions_data,
        "flags": {"multiSelect": {"enabled": True}, "treeView": {"enabled": True}},
    }


def test_initialize_builds_control_in_configured_mode(reg, params):
    control = reg.initialize(params)

    assert control is not None
    assert control.mode is SelectionMode.MULTI_TREE
    assert control.placeholder == "Select..."
    assert reg.get_control("regions") is control
    assert "regions" in reg


def test_placeholder_default_comes_from_configuration(reg, params):
    user_dir = _get_user_config_dir()
    user_dir.mkdir(parents=True)
    (user_dir / "control_defaults.yml").write_text('placeholder: "Choose..."\n', encoding="utf-8")

    control = reg.initialize(params)

    assert control.placeholder == "Choose..."


def test_missing_container_id_is_a_logged_no_op(reg, caplog):
    with caplog.at_level(logging.ERROR):
        assert reg.initialize({"data": []}) is None

    assert reg.container_ids() == []
    assert "containerId is required" in caplog.text


def test_unresolvable_container_is_a_logged_no_op(params, caplog):
    reg = ControlRegistry(container_resolver={"other": object()}.get)

    with caplog.at_level(logging.ERROR):
        assert reg.initialize(params) is None

    assert "Container with id 'regions' not found" in caplog.text
    assert reg.get_control("regions") is None


def test_resolved_container_is_kept(params):
    host = object()
    reg = ControlRegistry(container_resolver={"regions": host}.get)

    reg.initialize(params)

    assert reg.get_container("regions") is host


def test_non_boolean_flags_are_disabled_with_warning(reg, params, caplog):
    params["flags"] = {"multiSelect": {"enabled": "yes"}, "treeView": {"enabled": 1}, "bogus": True}

    with caplog.at_level(logging.WARNING):
        control = reg.initialize(params)

    assert control.mode is SelectionMode.SINGLE_FLAT
    assert "must be a literal true or false" in caplog.text
    assert "Unknown flag 'bogus'" in caplog.text


def test_reinitialize_replaces_previous_instance(reg, params):
    first = reg.initialize(params)
    reg.set_selection("regions", {"parents": [1]})

    second = reg.initialize(params)

    assert second is not first
    assert reg.get_selection("regions").has_data is False


def test_set_and_get_selection_round_trip(reg, params):
    reg.initialize(params)

    assert reg.set_selection("regions", {"children": [101]}) is True
    result = reg.get_selection("regions")

    assert result.container_id == "regions"
    assert result.to_payload() == {"parents": [], "children": [101]}
    assert reg.get_control("regions").tree.get_mark("regions-1") is Mark.INDETERMINATE


def test_unknown_container_degrades_gracefully(reg, caplog):
    with caplog.at_level(logging.WARNING):
        result = reg.get_selection("missing")
        ok = reg.set_selection("missing", {"parents": [1]})

    assert result.has_data is False
    assert result.mode is None
    assert ok is False
    assert "Container with id 'missing' not found" in caplog.text


def test_teardown_discards_control(reg, params):
    reg.initialize(params)

    assert reg.teardown("regions") is True
    assert reg.teardown("regions") is False
    assert reg.get_control("regions") is None


def test_module_level_api_uses_default_registry(params):
    try:
        control = api.initialize(params)
        api.set_selection("regions", {"parents": [2]})

        assert api.get_control("regions") is control
        assert api.get_selection("regions").to_payload() == {"parents": [2], "children": [201, 202, 203]}
    finally:
        api.teardown("regions")


def test_duplicate_ids_still_render(reg, caplog):
    with caplog.at_level(logging.WARNING):
        control = reg.initialize({
            "containerId": "dup",
            "data": [{"id": 1, "name": "A"}, {"id": 1, "name": "A"}],
        })

    assert [p.node_id for p in control.tree.parents()] == ["dup-1", "dup-1#2"]
    assert "Duplicate id 'dup-1'" in caplog.text
