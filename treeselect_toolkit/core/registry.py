from __future__ import annotations

"""Public API: create controls and read or write their selection by container id.

Every function here is safe to call from host code: configuration problems
and unknown containers are logged and turned into ``None``, ``False`` or an
empty :class:`SelectionResult`, never raised.

Examples
--------
>>> from treeselect_toolkit import initialize, get_selection, set_selection
>>> control = initialize({
...     "containerId": "fruits",
...     "data": [{"id": 1, "name": "Apple", "children": [{"id": 11, "name": "Gala"}]}],
...     "flags": {"multiSelect": {"enabled": True}, "treeView": {"enabled": True}},
... })
>>> set_selection("fruits", {"children": [11]})
True
>>> get_selection("fruits").to_payload()
{'parents': [1], 'children': [11]}
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from treeselect_toolkit.config import ConfigManager
from treeselect_toolkit.core.control import SelectionControl
from treeselect_toolkit.core.exceptions import ConfigurationError
from treeselect_toolkit.core.models import Identifier, SelectionResult
from treeselect_toolkit.core.models.control_config import ControlConfig

logger = logging.getLogger(__name__)

__all__ = [
    "ContainerResolver",
    "ControlRegistry",
    "default_registry",
    "initialize",
    "get_control",
    "get_selection",
    "set_selection",
    "teardown",
]

# Returns the host container for an id, or None when it does not exist
ContainerResolver = Callable[[str], Any]


class ControlRegistry:
    """Holds the live :class:`SelectionControl` of every container.

    Parameters
    ----------
    container_resolver : callable, optional
        Host lookup used at :meth:`initialize`; a container it cannot resolve
        is a configuration error. Without a resolver every id is accepted.
    """

    def __init__(self, container_resolver: Optional[ContainerResolver] = None) -> None:
        self.container_resolver = container_resolver
        self._controls: Dict[str, SelectionControl] = {}
        self._containers: Dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self, config: Union[ControlConfig, Mapping[str, Any]]) -> Optional[SelectionControl]:
        """Create (or replace) the control described by ``config``.

        Returns
        -------
        SelectionControl or None
            None when the configuration is unusable; nothing is registered then.
        """
        manager = ConfigManager()
        defaults = manager.get_control_defaults()
        try:
            if not isinstance(config, ControlConfig):
                config = ControlConfig.from_params(
                    config, default_placeholder=str(defaults.get("placeholder") or "Select..."),
                )
            container = self._resolve_container(config.container_id)
        except ConfigurationError as exc:
            logger.error("Control initialization failed: %s", exc)
            return None

        if config.container_id in self._controls:
            logger.info("Re-initializing control '%s'; previous state is discarded", config.container_id)

        control = SelectionControl(config, display_config=manager.get_display_config())
        self._controls[config.container_id] = control
        self._containers[config.container_id] = container
        return control

    def _resolve_container(self, container_id: str) -> Any:
        if self.container_resolver is None:
            return None
        try:
            container = self.container_resolver(container_id)
        except Exception as exc:
            raise ConfigurationError("Container lookup failed", container_id=container_id, cause=exc) from exc
        if container is None:
            raise ConfigurationError(
                f"Container with id '{container_id}' not found",
                container_id=container_id,
                problems=["containerId"],
            )
        return container

    def teardown(self, container_id: str) -> bool:
        """Discard the control of ``container_id``; False if none was registered."""
        control = self._controls.pop(container_id, None)
        self._containers.pop(container_id, None)
        if control is None:
            logger.warning("Nothing to tear down for container '%s'", container_id)
            return False
        logger.info("Control '%s' torn down", container_id)
        return True

    def clear(self) -> None:
        self._controls.clear()
        self._containers.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_control(self, container_id: str) -> Optional[SelectionControl]:
        return self._controls.get(container_id)

    def get_container(self, container_id: str) -> Any:
        return self._containers.get(container_id)

    def container_ids(self) -> List[str]:
        return list(self._controls)

    def __contains__(self, container_id: object) -> bool:
        return container_id in self._controls

    def get_selection(self, container_id: str) -> SelectionResult:
        """Return the selection of ``container_id``; empty for an unknown container."""
        control = self._controls.get(container_id)
        if control is None:
            logger.warning("Container with id '%s' not found", container_id)
            return SelectionResult.empty(container_id)
        return control.get_selection()

    def set_selection(self, container_id: str,
                      selections: Optional[Mapping[str, Iterable[Identifier]]] = None) -> bool:
        """Replace the selection of ``container_id`` by ``parents`` / ``children`` ids.

        Returns False when the container is unknown. Unknown item ids are
        logged and skipped, the call still succeeds.
        """
        control = self._controls.get(container_id)
        if control is None:
            logger.error("Container with id '%s' not found", container_id)
            return False
        control.set_selection(selections)
        return True


# ----------------------------------------------------------------------
# Module-level default registry
# ----------------------------------------------------------------------
default_registry = ControlRegistry()


def initialize(config: Union[ControlConfig, Mapping[str, Any]]) -> Optional[SelectionControl]:
    return default_registry.initialize(config)


def get_control(container_id: str) -> Optional[SelectionControl]:
    return default_registry.get_control(container_id)


def get_selection(container_id: str) -> SelectionResult:
    return default_registry.get_selection(container_id)


def set_selection(container_id: str, selections: Optional[Mapping[str, Iterable[Identifier]]] = None) -> bool:
    return default_registry.set_selection(container_id, selections)


def teardown(container_id: str) -> bool:
    return default_registry.teardown(container_id)
