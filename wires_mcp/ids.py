"""Wire identifier generation."""

from __future__ import annotations

import hashlib
import secrets
import time

ID_LENGTH = 7

# Attempts the store makes to find an unused id before giving up.
ID_RETRY_LIMIT = 5


def generate_id(title: str) -> str:
    """
    Generate a 7-character lowercase hex id for a new wire.

    The id is the prefix of a SHA-256 digest over the title, the current
    nanosecond clock and a random nonce, so identical titles created in the
    same instant still get different ids.
    """
    content = f"{title}|{time.time_ns()}|{secrets.token_hex(4)}"
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:ID_LENGTH]
