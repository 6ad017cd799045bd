"""MD5 helpers for schema change detection.

Hashes produced here are only compared against each other to log schema
changes.  They are **not** used for security purposes or as cache keys.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable


def md5_hash(data: str) -> str:
    """Return the hex-encoded MD5 digest of *data* (UTF-8 encoded).

    Examples
    --------
    >>> md5_hash("hello")
    '5d41402abc4b2a76b9719d911017c592'
    """
    return hashlib.md5(data.encode("utf-8")).hexdigest()


def hash_pairs(pairs: Iterable[tuple[str, str]]) -> str:
    """Order-sensitive hash of ``(name, type)`` pairs.

    Swapping two properties changes the hash; so does renaming or retyping
    any of them.

    >>> hash_pairs([("a", "title"), ("b", "select")]) == hash_pairs([("b", "select"), ("a", "title")])
    False
    """
    payload = [{"name": name, "type": type_} for name, type_ in pairs]
    return md5_hash(json.dumps(payload, ensure_ascii=False, separators=(",", ":")))
