"""
Human-in-the-loop scan workflow.

Provides:
- Scan classification and gating
- Operator decisions for unknown banks and beneficiaries
- Duplicate suppression before commit
"""

from .workflow import (
    DecisionAction,
    OperatorDecision,
    ScanOutcome,
    ScanResult,
    ScanWorkflow,
    WorkflowState,
    WorkflowStateError,
)

__all__ = [
    "ScanWorkflow",
    "ScanResult",
    "ScanOutcome",
    "WorkflowState",
    "WorkflowStateError",
    "OperatorDecision",
    "DecisionAction",
]
