"""
Session Controllers Package

High-level session orchestration, preview sequencing and the view contract.
"""

from session.controllers.preview_sequencer import PreviewSequencer
from session.controllers.session_manager import SessionManager
from session.controllers.session_view import (
    RenderState,
    describe,
    format_budget,
    select_render_state,
)

__all__ = [
    "PreviewSequencer",
    "RenderState",
    "SessionManager",
    "describe",
    "format_budget",
    "select_render_state",
]
