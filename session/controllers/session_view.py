"""
Session View Contract

Maps the read-only session status onto what a view should render.
Views never touch the manager's internals; they read get_status() and
send commands.
"""

from enum import Enum
from typing import Any, Dict

from session.constants import SessionStatus, format_ms


class RenderState(Enum):
    """Exactly one of these is shown at a time"""

    LOADING = "loading"
    ERROR = "error"
    LIVE_CAPTURE = "live_capture"
    PREVIEW = "preview"


_RENDER_BY_STATUS = {
    SessionStatus.INITIALIZING: RenderState.LOADING,
    SessionStatus.ERROR: RenderState.ERROR,
    SessionStatus.LIVE: RenderState.LIVE_CAPTURE,
    SessionStatus.PREVIEW_ACTIVE: RenderState.PREVIEW,
}


def select_render_state(status: Dict[str, Any]) -> RenderState:
    """
    Pick the render state for a get_status() snapshot.

    Example:
        select_render_state(manager.get_status()) -> RenderState.LIVE_CAPTURE
    """
    return _RENDER_BY_STATUS[SessionStatus(status["status"])]


def format_budget(status: Dict[str, Any]) -> str:
    """
    Recorded time against the budget, counting the live interval.

    Example:
        format_budget(manager.get_status()) -> "0:20 / 1:00"
    """
    used = status["total_recorded_ms"] + status.get("live_elapsed_ms", 0)
    used = min(used, status["budget_ms"])
    return f"{format_ms(used)} / {format_ms(status['budget_ms'])}"


def describe(status: Dict[str, Any]) -> str:
    """One status line for a text view"""
    state = select_render_state(status)

    if state is RenderState.LOADING:
        return "Starting camera..."

    if state is RenderState.ERROR:
        error = status.get("error") or {}
        return f"Camera unavailable ({error.get('kind', 'unknown')}). Try again."

    if state is RenderState.PREVIEW:
        total = len(status["segments"])
        return f"Preview {status['preview_index'] + 1}/{total}"

    line = f"{status['facing']} camera  {format_budget(status)}"
    if status["is_recording"]:
        line += "  REC"
    elif status["remaining_ms"] == 0:
        line += "  budget used"
    if status["suspended"]:
        line += "  (paused)"
    return line
