"""
Anti-forgery nonces bound to a form action.

A nonce is an HMAC-SHA256 digest of ``{tick}|{action}|{subject}`` truncated to
10 hex characters. The tick advances every half lifetime, and a nonce is
accepted for the tick it was minted in and the one after, so it stays valid
for between one half lifetime and a full lifetime.
"""

from __future__ import annotations

import hashlib
import hmac
import math
import time
from typing import Callable, Optional

NONCE_LENGTH = 10


class NonceManager:
    """Mint and check nonces with a server-side secret.

    Args:
        secret: HMAC key; every process that verifies must share it.
        lifetime_seconds: Full lifetime of a nonce (default one day).
        clock: Returns the current Unix time; injectable for tests.
    """

    def __init__(
        self,
        secret: str,
        lifetime_seconds: int = 86400,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if lifetime_seconds < 2:
            raise ValueError("lifetime_seconds must be at least 2")
        self._secret = secret.encode("utf-8")
        self._lifetime = lifetime_seconds
        self._clock = clock

    def tick(self) -> int:
        return math.ceil(self._clock() / (self._lifetime / 2))

    def _digest(self, tick: int, action: str, subject: str) -> str:
        message = f"{tick}|{action}|{subject}".encode("utf-8")
        full = hmac.new(self._secret, message, hashlib.sha256).hexdigest()
        return full[-12:][:NONCE_LENGTH]

    def create(self, action: str, subject: str = "") -> str:
        """Return a nonce for *action*, optionally tied to a *subject* (e.g. a user id)."""
        return self._digest(self.tick(), action, subject)

    def verify(self, nonce: Optional[str], action: str, subject: str = "") -> int:
        """Check *nonce* against *action*.

        Returns:
            1 if minted in the current tick, 2 if minted in the previous tick,
            0 if invalid (empty, wrong action or subject, or expired).
        """
        if not isinstance(nonce, str) or not nonce:
            return 0
        given = nonce.encode("utf-8")
        current = self.tick()
        for age, tick in enumerate((current, current - 1), start=1):
            expected = self._digest(tick, action, subject).encode("ascii")
            if hmac.compare_digest(given, expected):
                return age
        return 0
