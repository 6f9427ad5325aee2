from __future__ import annotations

"""Selection engine services.

Every service is UI-agnostic and operates on a :class:`SelectionTree` passed
in by the caller.
"""

from .propagation_service import PropagationService  # noqa: F401
from .bulk_toggle_service import BulkToggleService  # noqa: F401
from .selection_service import SelectionService, strategy_for  # noqa: F401
from .display_text_service import DisplayTextService  # noqa: F401
from .visibility_service import VisibilityService  # noqa: F401
from .search_service import SearchService, VisibilityResult  # noqa: F401

__all__: list[str] = [
    "PropagationService",
    "BulkToggleService",
    "SelectionService",
    "strategy_for",
    "DisplayTextService",
    "VisibilityService",
    "SearchService",
    "VisibilityResult",
]
