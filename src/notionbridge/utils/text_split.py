"""Split strings to fit Notion's 2000-character rich_text limit.

Python ``str`` slicing works on code-points, so a chunk boundary never
falls inside a multi-byte character.
"""

from __future__ import annotations


def split_string(text: str, limit: int = 2000) -> list[str]:
    """Split *text* into chunks of at most *limit* characters.

    Returns an empty list for empty input; the concatenation of the chunks
    always equals *text*.

    >>> split_string("hello world", 5)
    ['hello', ' worl', 'd']
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    if not text:
        return []

    return [text[i : i + limit] for i in range(0, len(text), limit)]
