"""TreeSelect Toolkit UI package.

Tkinter reference collaborators for the selection engine: an event
controller, a search coordinator and ttk widgets that render engine state.
"""

from .controllers.selection_controller import SelectionController  # noqa: F401
from .coordinators.search_coordinator import SearchCoordinator  # noqa: F401

__all__: list[str] = [
    "SelectionController",
    "SearchCoordinator",
]
