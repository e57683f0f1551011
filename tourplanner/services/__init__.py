"""Services layer - Application orchestration.

Available services:
- PlannerSession: state store of one planning session
- SessionRegistry: one session per client, with idle expiry
- AddressSuggestionService: debounced address lookups
- Notifier: auto-dismissing toast slot
- compose_route / fit_viewport: pure derivations of the session state
"""

from .notifications import Notifier
from .route_composer import compose_route
from .registry import SessionRegistry
from .session import PlannerSession, SessionSnapshot
from .suggestions import AddressSuggestionService, SuggestionField
from .viewport import fit_viewport

__all__ = [
    "PlannerSession",
    "SessionSnapshot",
    "SessionRegistry",
    "AddressSuggestionService",
    "SuggestionField",
    "Notifier",
    "compose_route",
    "fit_viewport",
]
