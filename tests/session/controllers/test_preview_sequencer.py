"""
Preview Sequencer Tests

Tests for looping playback order and cursor maintenance.

To run:
    pytest tests/session/controllers/test_preview_sequencer.py -v
"""

import pytest

from capture.interfaces.segment_encoder_interface import EncodedPayload
from session.controllers.preview_sequencer import PreviewSequencer
from session.errors import EmptyLedgerError
from session.models.payload_registry import PayloadRegistry
from session.models.segment import Segment, SegmentPayload


@pytest.fixture
def segments():
    """Three one-second segments with ids 1..3"""
    registry = PayloadRegistry()
    result = []
    for segment_id in (1, 2, 3):
        url = registry.register(EncodedPayload(data=b"x", mime_type="video/mp4"))
        result.append(
            Segment(id=segment_id, payload=SegmentPayload(registry, url), duration_ms=1000),
        )
    return result


@pytest.mark.unit
def test_sequencer_starts_at_first(segments):
    """Test playback begins with the first segment."""
    sequencer = PreviewSequencer(segments)

    assert sequencer.index == 0
    assert sequencer.current().id == 1
    assert len(sequencer) == 3


@pytest.mark.unit
def test_sequencer_wraps_around(segments):
    """Test advancing past the last segment returns to the first."""
    sequencer = PreviewSequencer(segments)

    played = [sequencer.advance().id for _ in range(7)]

    assert played == [2, 3, 1, 2, 3, 1, 2]


@pytest.mark.unit
def test_sequencer_single_segment_loops(segments):
    """Test a single segment loops onto itself."""
    sequencer = PreviewSequencer(segments[:1])

    assert sequencer.advance().id == 1
    assert sequencer.index == 0


@pytest.mark.unit
def test_sequencer_empty_raises():
    """Test current and advance refuse an empty playlist."""
    sequencer = PreviewSequencer([])

    with pytest.raises(EmptyLedgerError):
        sequencer.current()
    with pytest.raises(EmptyLedgerError):
        sequencer.advance()


@pytest.mark.unit
def test_sequencer_reset(segments):
    """Test reset returns to the first segment."""
    sequencer = PreviewSequencer(segments)
    sequencer.advance()

    sequencer.reset()

    assert sequencer.current().id == 1


@pytest.mark.unit
def test_sequencer_is_a_snapshot(segments):
    """Test later changes to the source list are not seen."""
    sequencer = PreviewSequencer(segments)

    segments.pop()

    assert len(sequencer) == 3


@pytest.mark.unit
def test_remove_before_cursor_keeps_current(segments):
    """Test removing an earlier segment keeps the same one current."""
    sequencer = PreviewSequencer(segments)
    sequencer.advance()

    assert sequencer.remove_at(0) is True

    assert sequencer.index == 0
    assert sequencer.current().id == 2


@pytest.mark.unit
def test_remove_at_cursor_end_clamps(segments):
    """Test removing the last segment under the cursor clamps it."""
    sequencer = PreviewSequencer(segments)
    sequencer.advance()
    sequencer.advance()

    sequencer.remove_at(2)

    assert sequencer.index == 1
    assert sequencer.current().id == 2


@pytest.mark.unit
def test_remove_last_remaining(segments):
    """Test removal reports when the playlist is empty."""
    sequencer = PreviewSequencer(segments[:1])

    assert sequencer.remove_at(0) is False
    assert len(sequencer) == 0


@pytest.mark.unit
def test_remove_out_of_range(segments):
    """Test an invalid position changes nothing."""
    sequencer = PreviewSequencer(segments)

    assert sequencer.remove_at(5) is True
    assert len(sequencer) == 3
