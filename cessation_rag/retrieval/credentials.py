"""
Round-robin credential pool for the completion service.

A single pool is shared by every caller in the process. Each call asks for
an attempt order: every credential once, starting at the rotation index,
and the index advances by one so load spreads across keys.
"""

import threading
from typing import Iterable

# Values left in .env templates that are not real keys
PLACEHOLDER_KEYS = {"YOUR_GEMINI_API_KEY_HERE"}


def mask_key(key: str) -> str:
    """Shorten a credential for log output."""
    return f"{key[:10]}..." if key else "<empty>"


class CredentialPool:
    """Ordered API keys plus a rotation index."""

    def __init__(self, keys: Iterable[str], start_index: int = 0):
        self._keys: list[str] = []
        for key in keys:
            key = (key or "").strip()
            if key and key not in PLACEHOLDER_KEYS and key not in self._keys:
                self._keys.append(key)
        self._index = start_index % len(self._keys) if self._keys else 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def keys(self) -> list[str]:
        return list(self._keys)

    def attempt_order(self) -> list[str]:
        """Every key exactly once, starting at the current rotation index."""
        with self._lock:
            if not self._keys:
                return []
            start = self._index
            self._index = (self._index + 1) % len(self._keys)
        return self._keys[start:] + self._keys[:start]
