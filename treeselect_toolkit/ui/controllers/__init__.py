"""UI controllers mediating between widgets and the selection engine."""

from .selection_controller import SelectionController  # noqa: F401

__all__: list[str] = ["SelectionController"]
