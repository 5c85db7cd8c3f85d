"""
Segment Ledger and Payload Tests

Tests for budget accounting in the ledger and exactly-once payload
release.

To run:
    pytest tests/session/models/test_segment_ledger.py -v
"""

import pytest

from capture.interfaces.segment_encoder_interface import EncodedPayload
from session.errors import BudgetExceededError, PayloadReleaseError
from session.models.ledger import SegmentLedger
from session.models.payload_registry import PayloadRegistry
from session.models.segment import Segment, SegmentPayload


@pytest.fixture
def registry():
    return PayloadRegistry()


@pytest.fixture
def make_segment(registry):
    """
    Provide factory for registered segments.

    Usage:
        segment = make_segment(1, 20_000)
    """

    def make(segment_id: int, duration_ms: int) -> Segment:
        url = registry.register(EncodedPayload(data=b"\x00" * 16, mime_type="video/mp4"))
        return Segment(
            id=segment_id,
            payload=SegmentPayload(registry, url),
            duration_ms=duration_ms,
        )

    return make


# =============================================================================
# LEDGER TESTS
# =============================================================================


@pytest.mark.unit
def test_ledger_empty():
    """Test a new ledger has the whole budget left."""
    ledger = SegmentLedger(60_000)

    assert len(ledger) == 0
    assert not ledger
    assert ledger.total_recorded_ms == 0
    assert ledger.remaining_ms == 60_000
    assert ledger.is_exhausted is False


@pytest.mark.unit
def test_ledger_rejects_non_positive_budget():
    """Test the budget must be positive."""
    with pytest.raises(ValueError):
        SegmentLedger(0)


@pytest.mark.unit
def test_ledger_total_is_sum(make_segment):
    """Test the total always equals the sum of durations."""
    ledger = SegmentLedger(60_000)
    ledger.append(make_segment(1, 20_000))
    ledger.append(make_segment(2, 15_500))

    assert ledger.total_recorded_ms == 35_500
    assert ledger.remaining_ms == 24_500
    assert [s.id for s in ledger] == [1, 2]


@pytest.mark.unit
def test_ledger_append_over_budget(make_segment):
    """Test appending past the budget is refused."""
    ledger = SegmentLedger(60_000)
    ledger.append(make_segment(1, 50_000))

    with pytest.raises(BudgetExceededError):
        ledger.append(make_segment(2, 10_001))

    assert len(ledger) == 1


@pytest.mark.unit
def test_ledger_exactly_full(make_segment):
    """Test a segment that lands exactly on the budget is accepted."""
    ledger = SegmentLedger(60_000)
    ledger.append(make_segment(1, 60_000))

    assert ledger.is_exhausted is True
    assert ledger.remaining_ms == 0


@pytest.mark.unit
def test_ledger_duplicate_id(make_segment):
    """Test ids are unique."""
    ledger = SegmentLedger(60_000)
    ledger.append(make_segment(1, 1_000))

    with pytest.raises(ValueError):
        ledger.append(make_segment(1, 1_000))


@pytest.mark.unit
def test_ledger_remove(make_segment):
    """Test remove returns the segment without releasing it."""
    ledger = SegmentLedger(60_000)
    segment = make_segment(1, 5_000)
    ledger.append(segment)

    removed = ledger.remove(1)

    assert removed is segment
    assert removed.payload.released is False
    assert ledger.total_recorded_ms == 0
    assert ledger.remove(1) is None


@pytest.mark.unit
def test_ledger_index_of(make_segment):
    """Test position lookup."""
    ledger = SegmentLedger(60_000)
    ledger.append(make_segment(4, 1_000))
    ledger.append(make_segment(7, 1_000))

    assert ledger.index_of(7) == 1
    assert ledger.index_of(5) == -1


@pytest.mark.unit
def test_ledger_summaries(make_segment):
    """Test summaries carry ids and durations only."""
    ledger = SegmentLedger(60_000)
    ledger.append(make_segment(1, 2_000))

    assert [s.to_dict() for s in ledger.summaries()] == [{"id": 1, "duration_ms": 2_000}]


# =============================================================================
# SEGMENT AND PAYLOAD TESTS
# =============================================================================


@pytest.mark.unit
def test_segment_rejects_negative_duration(registry):
    """Test durations are never negative."""
    url = registry.register(EncodedPayload(data=b"x", mime_type="video/mp4"))

    with pytest.raises(ValueError):
        Segment(id=1, payload=SegmentPayload(registry, url), duration_ms=-1)


@pytest.mark.unit
def test_payload_released_once(make_segment, registry):
    """Test a second release is a no-op."""
    segment = make_segment(1, 1_000)

    assert segment.release() is True
    assert segment.release() is False

    assert registry.revoked_count == 1
    assert registry.outstanding() == 0
    assert segment.payload.data is None


@pytest.mark.unit
def test_payload_resolves_data(make_segment):
    """Test payload bytes are reachable until release."""
    segment = make_segment(1, 1_000)

    assert segment.payload.size_bytes == 16
    assert segment.payload.mime_type == "video/mp4"
    assert segment.payload.url.startswith(PayloadRegistry.URL_PREFIX)


@pytest.mark.unit
def test_registry_double_revoke(registry):
    """Test the registry refuses to revoke a URL twice."""
    url = registry.register(EncodedPayload(data=b"x", mime_type="video/mp4"))
    registry.revoke(url)

    with pytest.raises(PayloadReleaseError):
        registry.revoke(url)

    assert registry.resolve(url) is None
