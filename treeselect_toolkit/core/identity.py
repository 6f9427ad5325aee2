from __future__ import annotations

"""Composite node identifiers and duplicate detection.

Every parent gets ``<container>-<parent>`` and every child
``<container>-<parent>-<child>``. Identifiers are joined as-is: ids that
themselves contain ``-`` can produce ambiguous composites, which is a known
limitation rather than something this module tries to escape.

Duplicate tracking lives in a :class:`RenderPassContext` created per control
and reset at the start of each full render, so two controls never share it.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Set

from treeselect_toolkit.core.models import Identifier

logger = logging.getLogger(__name__)

__all__ = ["SEPARATOR", "generate_id", "DuplicateId", "RenderPassContext"]

SEPARATOR = "-"


def generate_id(container_id: str, parent_id: Identifier, child_id: Optional[Identifier] = None) -> str:
    """Return the composite id of a parent (``child_id`` is None) or a child."""
    if child_id is None:
        return f"{container_id}{SEPARATOR}{parent_id}"
    return f"{container_id}{SEPARATOR}{parent_id}{SEPARATOR}{child_id}"


@dataclass(frozen=True)
class DuplicateId:
    """One repeated composite id seen during a render pass."""

    composite_id: str
    parent_id: Identifier
    child_id: Optional[Identifier]
    occurrence: int


class RenderPassContext:
    """Tracks composite ids generated during one render pass.

    Examples
    --------
    >>> ctx = RenderPassContext("box")
    >>> ctx.begin()
    >>> ctx.validate_id(generate_id("box", 1), 1)
    True
    >>> ctx.validate_id(generate_id("box", 1), 1)
    False
    """

    def __init__(self, container_id: str) -> None:
        self.container_id = container_id
        self._seen: Set[str] = set()
        self._counts: dict = {}
        self._duplicates: List[DuplicateId] = []

    def begin(self) -> None:
        """Reset tracking at the start of a full render."""
        self._seen.clear()
        self._counts.clear()
        self._duplicates.clear()

    def validate_id(self, composite_id: str, parent_id: Identifier, child_id: Optional[Identifier] = None) -> bool:
        """Record ``composite_id``; return False (and log) if it was seen before."""
        count = self._counts.get(composite_id, 0) + 1
        self._counts[composite_id] = count
        if composite_id not in self._seen:
            self._seen.add(composite_id)
            return True

        self._duplicates.append(DuplicateId(composite_id, parent_id, child_id, count))
        if child_id is None:
            logger.warning(
                "Duplicate id '%s' in control '%s': parent id %r appears %d times",
                composite_id, self.container_id, parent_id, count,
            )
        else:
            logger.warning(
                "Duplicate id '%s' in control '%s': child id %r under parent %r appears %d times",
                composite_id, self.container_id, child_id, parent_id, count,
            )
        return False

    def occurrences(self, composite_id: str) -> int:
        return self._counts.get(composite_id, 0)

    @property
    def duplicates(self) -> List[DuplicateId]:
        return list(self._duplicates)
