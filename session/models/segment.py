"""
Segment Models

Data classes representing recorded segments and their payloads.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from capture.constants import Facing
from session.models.payload_registry import PayloadRegistry


class SegmentPayload:
    """
    Exclusive owner of one registered payload.

    release() revokes the registry URL the first time and is a no-op after
    that, so the backing buffer is freed exactly once.
    """

    def __init__(self, registry: PayloadRegistry, url: str):
        self._registry = registry
        self.url = url
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def data(self) -> Optional[bytes]:
        """Encoded bytes, or None after release"""
        if self._released:
            return None
        payload = self._registry.resolve(self.url)
        return payload.data if payload else None

    @property
    def mime_type(self) -> Optional[str]:
        payload = self._registry.resolve(self.url)
        return payload.mime_type if payload else None

    @property
    def size_bytes(self) -> int:
        data = self.data
        return len(data) if data else 0

    def release(self) -> bool:
        """
        Free the payload.

        Returns:
            True if this call released it, False if already released
        """
        if self._released:
            return False
        self._released = True
        self._registry.revoke(self.url)
        return True

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"SegmentPayload({self.url}, {state})"


@dataclass
class Segment:
    """
    One finalized recording interval.

    duration_ms is the wall-clock length used for budget accounting;
    encoded_duration_ms is what the encoder reported.
    """

    id: int
    payload: SegmentPayload
    duration_ms: int
    created_at: datetime = field(default_factory=datetime.now)
    facing: Optional[Facing] = None
    encoded_duration_ms: Optional[int] = None

    def __post_init__(self):
        if self.duration_ms < 0:
            raise ValueError(f"Segment duration cannot be negative: {self.duration_ms}")

    def release(self) -> bool:
        """Release the payload (exactly once)"""
        return self.payload.release()

    def summary(self) -> "SegmentSummary":
        """View-safe projection without the payload"""
        return SegmentSummary(id=self.id, duration_ms=self.duration_ms)


@dataclass(frozen=True)
class SegmentSummary:
    """Segment as exposed to the view: id and duration only"""

    id: int
    duration_ms: int

    def to_dict(self) -> dict:
        return {"id": self.id, "duration_ms": self.duration_ms}
