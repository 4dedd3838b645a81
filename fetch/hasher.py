"""
Hashing utilities for cache addressing.
"""

import hashlib


FILENAME_HASH_LENGTH = 32


def hash_content(text: str, length: int = 16) -> str:
    """
    Hash text content for identity/stability tracking.

    Args:
        text: The text to hash
        length: Length of returned hash (default 16 chars)

    Returns:
        Truncated SHA-256 hex digest
    """
    return hashlib.sha256(text.encode('utf-8', errors='replace')).hexdigest()[:length]


def url_to_filename(url: str, extension: str = '.html') -> str:
    """
    Map a URL to its cache filename.

    Pure function of the URL: callers strip session IDs first so that the
    same contract always lands in the same slot.

    Args:
        url: Cleaned, session-ID-stripped URL
        extension: File extension including the dot

    Returns:
        Hex digest filename, e.g. "3f2a...9c.html"
    """
    return hash_content(url, length=FILENAME_HASH_LENGTH) + extension
