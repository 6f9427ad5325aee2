from __future__ import annotations

"""Exception classes for the selection engine.

Exceptions are raised only while parsing a control configuration and are
caught at the registry boundary; public operations never let them reach the
host application.
"""

from typing import List, Optional


class TreeSelectError(Exception):
    """Base exception for all selection-engine errors."""

    def __init__(self, message: str, container_id: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.container_id = container_id
        self.cause = cause

    def __str__(self) -> str:
        if self.container_id:
            return f"[Control: {self.container_id}] {super().__str__()}"
        return super().__str__()


class ConfigurationError(TreeSelectError):
    """Raised when a control configuration cannot be used.

    This covers a missing or unresolvable container and a ``data`` value that
    is not a list of items.
    """

    def __init__(self, message: str, container_id: Optional[str] = None,
                 problems: Optional[List[str]] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, container_id, cause)
        self.problems = problems or []
