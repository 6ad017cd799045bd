"""Tests for utility functions.

Tests for: chunk_children, split_string, md5_hash, hash_pairs, redact.
"""

import hashlib

import pytest

from notionbridge.utils.chunk import chunk_children
from notionbridge.utils.hashing import hash_pairs, md5_hash
from notionbridge.utils.redact import redact
from notionbridge.utils.text_split import split_string

# =========================================================================
# chunk_children tests
# =========================================================================

class TestChunkChildren:
    def test_empty_list(self):
        assert chunk_children([]) == []

    def test_at_limit(self):
        result = chunk_children([{"type": "paragraph"}] * 100)
        assert [len(batch) for batch in result] == [100]

    def test_over_limit(self):
        result = chunk_children([{"type": "paragraph"}] * 205)
        assert [len(batch) for batch in result] == [100, 100, 5]

    def test_order_preserved(self):
        blocks = [{"type": "paragraph", "n": i} for i in range(7)]
        result = chunk_children(blocks, size=3)
        assert [b["n"] for batch in result for b in batch] == list(range(7))

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            chunk_children([{"type": "paragraph"}], size=0)


# =========================================================================
# split_string tests
# =========================================================================

class TestSplitString:
    def test_empty(self):
        assert split_string("") == []

    def test_short_string_unchanged(self):
        assert split_string("hello", 2000) == ["hello"]

    def test_chunks_rejoin(self):
        text = "abcdefghij" * 450
        chunks = split_string(text, 2000)
        assert [len(c) for c in chunks] == [2000, 2000, 500]
        assert "".join(chunks) == text

    def test_multibyte_characters_not_broken(self):
        text = "日本語" * 3
        chunks = split_string(text, 4)
        assert "".join(chunks) == text
        assert all(len(c) <= 4 for c in chunks)

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            split_string("abc", 0)


# =========================================================================
# hashing tests
# =========================================================================

class TestHashing:
    def test_md5_matches_hashlib(self):
        assert md5_hash("hello") == hashlib.md5(b"hello").hexdigest()

    def test_hash_pairs_order_sensitive(self):
        a = hash_pairs([("a", "title"), ("b", "select")])
        b = hash_pairs([("b", "select"), ("a", "title")])
        assert a != b

    def test_hash_pairs_deterministic(self):
        pairs = [("Name", "title"), ("Tags", "multi_select")]
        assert hash_pairs(pairs) == hash_pairs(list(pairs))

    def test_hash_pairs_type_sensitive(self):
        assert hash_pairs([("a", "select")]) != hash_pairs([("a", "status")])


# =========================================================================
# redact tests
# =========================================================================

class TestRedact:
    def test_sensitive_keys_masked(self):
        result = redact({"password": 123, "nested": {"api_key": ["x"]}})
        assert result == {"password": "<redacted>", "nested": {"api_key": "<redacted>"}}

    def test_bearer_header(self):
        assert redact({"Authorization": "Bearer ntn_abc123"}) == {
            "Authorization": "Bearer <redacted>"
        }

    def test_token_scrubbed_everywhere(self):
        token = "secret_abcdef1234"
        payload = {"body": {"message": f"bad token {token}"}, "items": [token]}
        result = redact(payload, token)
        assert token not in str(result)
        assert result["body"]["message"] == "bad token <redacted:...1234>"

    def test_input_not_mutated(self):
        payload = {"token": "t", "data": {"a": 1}}
        redact(payload)
        assert payload == {"token": "t", "data": {"a": 1}}

    def test_binary_summarized(self):
        assert redact({"blob": b"\x00\x01"}) == {"blob": "<binary:2_bytes>"}
