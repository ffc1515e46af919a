"""Utility package - export only."""

from .encoding import repair, repair_text, has_corruption_fingerprint
from .hash_utils import hash_string, generate_cache_key

__all__ = [
    "repair",
    "repair_text",
    "has_corruption_fingerprint",
    "hash_string",
    "generate_cache_key",
]
