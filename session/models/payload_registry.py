"""
Payload Registry

In-memory store for encoded segment payloads, addressed by revocable
blob URLs. Every registered payload must be revoked exactly once.
"""

import logging
import threading
import uuid
from typing import Dict, Optional

from capture.interfaces.segment_encoder_interface import EncodedPayload
from session.errors import PayloadReleaseError


class PayloadRegistry:
    """
    Owns the bytes of every live segment payload.

    Usage:
        registry = PayloadRegistry()
        url = registry.register(payload)
        data = registry.resolve(url)
        registry.revoke(url)
    """

    URL_PREFIX = "blob:segment/"

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._payloads: Dict[str, EncodedPayload] = {}
        self._lock = threading.Lock()
        self.revoked_count = 0

    def register(self, payload: EncodedPayload) -> str:
        """Store a payload and return its URL"""
        url = f"{self.URL_PREFIX}{uuid.uuid4()}"
        with self._lock:
            self._payloads[url] = payload
        self.logger.debug(f"Registered {url} ({payload.size_bytes} bytes)")
        return url

    def resolve(self, url: str) -> Optional[EncodedPayload]:
        """Get the payload behind a URL, or None once revoked"""
        with self._lock:
            return self._payloads.get(url)

    def revoke(self, url: str) -> None:
        """
        Drop a payload.

        Raises:
            PayloadReleaseError: URL unknown or already revoked
        """
        with self._lock:
            if self._payloads.pop(url, None) is None:
                raise PayloadReleaseError(f"Payload {url} is not registered")
            self.revoked_count += 1
        self.logger.debug(f"Revoked {url}")

    def outstanding(self) -> int:
        """Number of payloads registered and not revoked"""
        with self._lock:
            return len(self._payloads)
