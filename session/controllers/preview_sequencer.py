"""
Preview Sequencer

Deterministic looping playback order over a frozen copy of the segments.
The sequencer never touches the ledger; the session manager tells it when
a segment is removed.
"""

import logging
from typing import Sequence, Tuple

from session.errors import EmptyLedgerError
from session.models.segment import Segment


class PreviewSequencer:
    """
    Plays segments back-to-back, looping forever.

    Usage:
        sequencer = PreviewSequencer(ledger.segments)
        segment = sequencer.current()
        # ... on end of playback ...
        segment = sequencer.advance()
    """

    def __init__(self, segments: Sequence[Segment]):
        self.logger = logging.getLogger(__name__)
        self._segments: Tuple[Segment, ...] = tuple(segments)
        self._index = 0

    @property
    def index(self) -> int:
        """Current cursor position, always inside [0, len) when non-empty"""
        return self._index

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    def current(self) -> Segment:
        """
        Segment under the cursor.

        Raises:
            EmptyLedgerError: No segments to play
        """
        if not self._segments:
            raise EmptyLedgerError("No segments to preview")
        return self._segments[self._index]

    def advance(self) -> Segment:
        """
        Move to the next segment, wrapping to the first after the last.

        Returns:
            The new current segment
        """
        if not self._segments:
            raise EmptyLedgerError("No segments to preview")
        self._index = (self._index + 1) % len(self._segments)
        return self._segments[self._index]

    def reset(self) -> None:
        self._index = 0

    def remove_at(self, position: int) -> bool:
        """
        Drop the segment at `position` from the playlist.

        An earlier removal shifts the cursor down so the same segment stays
        current; the cursor is then clamped into the new range.

        Returns:
            False if the playlist is now empty
        """
        if not 0 <= position < len(self._segments):
            return bool(self._segments)

        segments = list(self._segments)
        del segments[position]
        self._segments = tuple(segments)

        if position < self._index:
            self._index -= 1
        if self._segments:
            self._index = min(self._index, len(self._segments) - 1)
        else:
            self._index = 0

        self.logger.debug(
            f"Preview playlist now {len(self._segments)} segments, "
            f"cursor {self._index}",
        )
        return bool(self._segments)

    def __len__(self) -> int:
        return len(self._segments)
