"""
Session Models Package

Data structures for segments, their payloads and the ledger.
"""

from session.models.ledger import SegmentLedger
from session.models.payload_registry import PayloadRegistry
from session.models.segment import Segment, SegmentPayload, SegmentSummary

__all__ = [
    "PayloadRegistry",
    "Segment",
    "SegmentLedger",
    "SegmentPayload",
    "SegmentSummary",
]
