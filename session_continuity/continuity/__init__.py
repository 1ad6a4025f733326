"""
Continuity module for reading persisted session state.

This module provides read-only tools for reconstructing context across
Claude sessions, including:
- FieldRule/extract_field: default-safe extraction from loose markdown
- HandoffResolver: latest task or auto handoff of a session
- LedgerResolver: latest continuity ledger plus its latest handoff
- OutcomeReporter: handoffs in the artifact index lacking an outcome
"""

from .extract import FieldRule, extract_field, extract_fields, search_pattern
from .handoff import HandoffKind, HandoffResolver, HandoffSummary
from .ledger import LedgerResolver, LedgerSummary, LedgerView
from .outcomes import OutcomeQueryResult, OutcomeReporter, UnmarkedOutcome

__all__ = [
    "FieldRule",
    "extract_field",
    "extract_fields",
    "search_pattern",
    "HandoffKind",
    "HandoffResolver",
    "HandoffSummary",
    "LedgerResolver",
    "LedgerSummary",
    "LedgerView",
    "OutcomeQueryResult",
    "OutcomeReporter",
    "UnmarkedOutcome",
]
