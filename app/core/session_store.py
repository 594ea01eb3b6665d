"""
Process-wide blacklist of logged-out access tokens.

Tokens are stateless JWTs, so logout only works if every request checks the
blacklist. Entries are kept until the token's own expiry and then dropped by
``sweep()``, which the app lifespan runs periodically.

The store lives in process memory: with more than one API instance a token
logged out on one instance is still accepted by the others. A multi-instance
deployment needs a shared store behind the same interface.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class TokenBlacklist:
    def __init__(self) -> None:
        self._entries: Dict[str, datetime] = {}
        self._lock = threading.Lock()
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def init(self) -> None:
        with self._lock:
            self._entries.clear()
            self._active = True
        logger.info("Token blacklist initialised.")

    def teardown(self) -> None:
        with self._lock:
            dropped = len(self._entries)
            self._entries.clear()
            self._active = False
        logger.info("Token blacklist torn down (%d entries dropped).", dropped)

    def add(self, token: str, expires_at: datetime) -> None:
        with self._lock:
            self._entries[token] = expires_at
        logger.info("Token blacklisted: %s...", token[:10])

    def contains(self, token: str) -> bool:
        with self._lock:
            return token in self._entries

    def sweep(self, now: Optional[datetime] = None) -> int:
        """Drop entries whose token has expired anyway. Returns the count removed."""
        now = now or datetime.now(timezone.utc)
        with self._lock:
            expired = [token for token, exp in self._entries.items() if exp <= now]
            for token in expired:
                del self._entries[token]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


token_blacklist = TokenBlacklist()
