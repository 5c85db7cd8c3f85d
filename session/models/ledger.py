"""
Segment Ledger

Ordered segment collection with derived total duration and a fixed budget.
"""

from typing import Iterator, List, Optional, Tuple

from session.errors import BudgetExceededError
from session.models.segment import Segment, SegmentSummary


class SegmentLedger:
    """
    Ordered list of recorded segments.

    The total is recomputed from the segments on every read, so it always
    equals the literal sum of durations.
    """

    def __init__(self, budget_ms: int):
        if budget_ms <= 0:
            raise ValueError(f"Budget must be positive: {budget_ms}")
        self.budget_ms = budget_ms
        self._segments: List[Segment] = []

    @property
    def segments(self) -> Tuple[Segment, ...]:
        """Immutable snapshot in recording order"""
        return tuple(self._segments)

    @property
    def total_recorded_ms(self) -> int:
        return sum(segment.duration_ms for segment in self._segments)

    @property
    def remaining_ms(self) -> int:
        return max(0, self.budget_ms - self.total_recorded_ms)

    @property
    def is_exhausted(self) -> bool:
        return self.total_recorded_ms >= self.budget_ms

    def append(self, segment: Segment) -> None:
        """
        Add a segment at the end.

        Raises:
            BudgetExceededError: If the total would pass the budget
            ValueError: If the id is already present
        """
        if self.get(segment.id) is not None:
            raise ValueError(f"Duplicate segment id: {segment.id}")

        new_total = self.total_recorded_ms + segment.duration_ms
        if new_total > self.budget_ms:
            raise BudgetExceededError(
                f"Segment {segment.id} ({segment.duration_ms} ms) would bring "
                f"total to {new_total} ms > {self.budget_ms} ms",
            )
        self._segments.append(segment)

    def get(self, segment_id: int) -> Optional[Segment]:
        for segment in self._segments:
            if segment.id == segment_id:
                return segment
        return None

    def index_of(self, segment_id: int) -> int:
        """Position of a segment, or -1 if absent"""
        for position, segment in enumerate(self._segments):
            if segment.id == segment_id:
                return position
        return -1

    def remove(self, segment_id: int) -> Optional[Segment]:
        """
        Remove a segment without releasing it.

        Returns:
            The removed segment, or None if the id is unknown
        """
        position = self.index_of(segment_id)
        if position < 0:
            return None
        return self._segments.pop(position)

    def clear(self) -> List[Segment]:
        """Remove and return every segment in order"""
        removed, self._segments = self._segments, []
        return removed

    def summaries(self) -> List[SegmentSummary]:
        return [segment.summary() for segment in self._segments]

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(list(self._segments))

    def __bool__(self) -> bool:
        return bool(self._segments)

    def __repr__(self) -> str:
        return (
            f"SegmentLedger({len(self)} segments, "
            f"{self.total_recorded_ms}/{self.budget_ms} ms)"
        )
