"""
Hashing helpers.
"""
from .hashing import sha1_hex

__all__ = [
    'sha1_hex',
]
