import logging
import time
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Set


class InvalidTransitionError(Exception):
    """Raised when a transition is not in the allowed table"""

    pass


class StateMachine:
    """
    Table-driven state holder.

    Owns the current state, validates transitions against an allowed table,
    logs every change and notifies a single on_state_change callback.
    """

    def __init__(
        self,
        initial_state: Enum,
        transitions: Dict[Enum, Iterable[Enum]],
        name: str = "state machine",
    ):
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.current_state = initial_state
        self.previous_state: Optional[Enum] = None
        self.state_start_time = time.time()
        self._transitions: Dict[Enum, Set[Enum]] = {
            state: set(targets) for state, targets in transitions.items()
        }

        # Called as on_state_change(old_state, new_state, reason)
        self.on_state_change: Optional[Callable[[Enum, Enum, str], None]] = None

        self.logger.info(f"{name} initialized in {initial_state.value} state")

    def get_current_state(self) -> Enum:
        """Get the current state"""
        return self.current_state

    def get_state_duration(self) -> float:
        """Get how long we've been in the current state (seconds)"""
        return time.time() - self.state_start_time

    def can_transition(self, new_state: Enum) -> bool:
        """Check whether new_state is reachable from the current state"""
        return new_state in self._transitions.get(self.current_state, set())

    def transition_to(self, new_state: Enum, reason: str = "") -> bool:
        """
        Move to new_state.

        Returns:
            True if the state changed, False if already in new_state

        Raises:
            InvalidTransitionError: If the table forbids the move
        """
        if new_state == self.current_state:
            self.logger.debug(f"Already in state {new_state.value}")
            return False

        if not self.can_transition(new_state):
            raise InvalidTransitionError(
                f"{self.name}: {self.current_state.value} -> {new_state.value} "
                f"is not allowed",
            )

        old_state = self.current_state
        self.previous_state = old_state
        self.current_state = new_state
        self.state_start_time = time.time()

        log_msg = f"State transition: {old_state.value} -> {new_state.value}"
        if reason:
            log_msg += f" ({reason})"
        self.logger.info(log_msg)

        if self.on_state_change:
            try:
                self.on_state_change(old_state, new_state, reason)
            except Exception as e:
                self.logger.error(f"Error in state change callback: {e}")

        return True

    def get_status_info(self) -> Dict:
        """Get detailed status information for debugging/monitoring"""
        return {
            "current_state": self.current_state.value,
            "previous_state": (
                self.previous_state.value if self.previous_state else None
            ),
            "state_duration": self.get_state_duration(),
        }
