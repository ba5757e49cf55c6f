"""Reviewer assignment, reassignment, and cascading deactivation."""
from .deactivation import DeactivationController, DeactivationReport, SlotOutcome, SlotStatus
from .engine import AssignmentEngine, ReassignmentResult
from .selector import ReviewerSelector

__all__ = [
    "AssignmentEngine",
    "ReassignmentResult",
    "ReviewerSelector",
    "DeactivationController",
    "DeactivationReport",
    "SlotOutcome",
    "SlotStatus",
]
