"""State layer.

Decides whether a freshly fetched status is new information.  The last
persisted row is the only state consulted; nothing is cached in memory.
"""

from pylightbug.state.detector import ChangeDetector, DecisionReason, PersistDecision
from pylightbug.state.policy import changed_fields, status_changed

__all__ = ["ChangeDetector", "DecisionReason", "PersistDecision", "changed_fields", "status_changed"]
