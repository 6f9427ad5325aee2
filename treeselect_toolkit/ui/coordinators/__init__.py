"""Coordinators wiring controller results into widgets."""

from .search_coordinator import SearchCoordinator  # noqa: F401

__all__: list[str] = ["SearchCoordinator"]
