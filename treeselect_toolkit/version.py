"""Package version helper."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version


def get_app_version() -> str:
    """Return the installed distribution version (``v0.1.0``), or ``vdev`` from a source checkout."""
    try:
        return f"v{version('treeselect-toolkit')}"
    except PackageNotFoundError:
        return "vdev"
