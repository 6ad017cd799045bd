from .chunk import chunk_children
from .hashing import hash_pairs, md5_hash
from .redact import redact
from .text_split import split_string

__all__ = [
    "chunk_children",
    "split_string",
    "md5_hash",
    "hash_pairs",
    "redact",
]
