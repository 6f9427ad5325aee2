"""Top-level package of the TreeSelect Toolkit.

The selection engine under :mod:`treeselect_toolkit.core` is GUI-agnostic.
Hosts should only depend on the public API re-exported here; the Tk
reference widgets live in :mod:`treeselect_toolkit.ui`.
"""

from .core.control import SelectionControl
from .core.models import Mark, SelectionMode, SelectionResult, StateDelta
from .core.models.events import ToggleEvent
from .core.registry import (
    ControlRegistry,
    get_control,
    get_selection,
    initialize,
    set_selection,
    teardown,
)

__all__: list[str] = [
    "SelectionControl",
    "ControlRegistry",
    "Mark",
    "SelectionMode",
    "SelectionResult",
    "StateDelta",
    "ToggleEvent",
    "initialize",
    "get_control",
    "get_selection",
    "set_selection",
    "teardown",
]
