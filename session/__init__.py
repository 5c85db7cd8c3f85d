"""
Session Module

Segmented recording session: stream lifecycle, recording budget, segment
ledger and preview playback.

Public API:
    - SessionManager: Owns one recording session
    - SessionConfig: YAML-backed session settings
    - SessionStatus / SessionEvent / StopReason: Observable state and events
    - SessionError / SessionErrorKind: Error taxonomy
    - Segment / SegmentLedger: Recorded segments
    - RenderState / select_render_state: View contract

Usage:
    from session import SessionManager

    manager = SessionManager()
    manager.initialize()
    manager.start_recording()
    segment = manager.stop_recording()
    manager.cleanup()
"""

from session.config import SessionConfig
from session.constants import (
    SessionErrorKind,
    SessionEvent,
    SessionStatus,
    StopReason,
    format_ms,
)
from session.controllers import (
    PreviewSequencer,
    RenderState,
    SessionManager,
    describe,
    format_budget,
    select_render_state,
)
from session.errors import (
    BudgetExceededError,
    EmptyLedgerError,
    PayloadReleaseError,
    SessionError,
    classify_error,
)
from session.models import (
    PayloadRegistry,
    Segment,
    SegmentLedger,
    SegmentPayload,
    SegmentSummary,
)

__all__ = [
    "BudgetExceededError",
    "EmptyLedgerError",
    "PayloadRegistry",
    "PayloadReleaseError",
    "PreviewSequencer",
    "RenderState",
    "Segment",
    "SegmentLedger",
    "SegmentPayload",
    "SegmentSummary",
    "SessionConfig",
    "SessionError",
    "SessionErrorKind",
    "SessionEvent",
    "SessionManager",
    "SessionStatus",
    "StopReason",
    "classify_error",
    "describe",
    "format_budget",
    "format_ms",
    "select_render_state",
]
