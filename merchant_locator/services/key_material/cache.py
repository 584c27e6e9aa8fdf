"""
Optional read-through cache of decoded signing keys.

Entries are keyed by a SHA-256 of the raw source bytes and of the
password, never by source name: a rotated secret produces a new key and
misses immediately, whatever the TTL. The TTL only bounds how long a
decoded key stays in memory after its last decode. Failures are never
cached.
"""

import hashlib
import threading
import time
from collections import OrderedDict
from typing import Callable, Tuple

from ...entities import KeyMaterial

DEFAULT_MAX_ENTRIES = 8


def cache_key(raw: bytes, password: str) -> str:
    password_digest = hashlib.sha256(password.encode("utf-8")).digest()
    return hashlib.sha256(raw + b"\x00" + password_digest).hexdigest()


class KeyMaterialCache:

    def __init__(
        self,
        ttl: float,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl <= 0:
            raise ValueError("ttl must be positive")

        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, KeyMaterial]]" = OrderedDict()
        self._lock = threading.Lock()

    def get_or_decode(self, raw: bytes, password: str, decode: Callable[[bytes, str], KeyMaterial]) -> KeyMaterial:
        key = cache_key(raw, password)
        now = self._clock()

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0] > now:
                self._entries.move_to_end(key)
                return entry[1]

            self._entries.pop(key, None)

        # decoding is CPU bound, do not hold the lock meanwhile
        key_material = decode(raw, password)

        with self._lock:
            self._entries[key] = (now + self.ttl, key_material)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

        return key_material

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return len(self._entries)
