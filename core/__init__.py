"""
Core utilities and modules.

Public API:
    - EventBus: Publish/subscribe observation sink
    - Event: A published observation
    - StateMachine: Table-driven state holder
    - InvalidTransitionError: Raised on forbidden transitions

Usage:
    from core import EventBus

    bus = EventBus()
    bus.subscribe_all(lambda event: print(event.type, event.data))
"""

from core.event_bus import Event, EventBus
from core.state_machine import InvalidTransitionError, StateMachine

__all__ = [
    "Event",
    "EventBus",
    "InvalidTransitionError",
    "StateMachine",
]
