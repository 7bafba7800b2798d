"""
Edit distance scoring for fuzzy title matching.

Provides:
- Levenshtein distance between two strings
- Batched distances between one pattern and many equal-length windows

The dynamic program keeps a single row per pattern character. Substitutions
and deletions are vectorized with numpy; insertions are resolved with a
running minimum, since cur[j] = min over k <= j of (cur[k] + j - k).
"""

import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

# Number of windows scored per numpy batch
DEFAULT_BATCH_SIZE = 512


def as_codes(text: str) -> np.ndarray:
    """Convert a string to an array of code points."""
    return np.fromiter((ord(c) for c in text), dtype=np.int64, count=len(text))


def batch_distances(pattern: str, windows: np.ndarray) -> np.ndarray:
    """
    Compute the edit distance from a pattern to each row of a window matrix.

    Args:
        pattern: String to compare against
        windows: 2D array (n_windows x window_length) of code points

    Returns:
        1D int array with one distance per window
    """
    n_windows, width = windows.shape
    if not pattern:
        return np.full(n_windows, width, dtype=np.int64)
    if width == 0:
        return np.full(n_windows, len(pattern), dtype=np.int64)

    offsets = np.arange(width + 1, dtype=np.int64)
    prev = np.broadcast_to(offsets, (n_windows, width + 1)).copy()
    cur = np.empty_like(prev)

    for i, char in enumerate(pattern, start=1):
        cost = (windows != ord(char)).astype(np.int64)
        cur[:, 0] = i
        np.minimum(prev[:, 1:] + 1, prev[:, :-1] + cost, out=cur[:, 1:])
        cur = np.minimum.accumulate(cur - offsets, axis=1) + offsets
        prev, cur = cur, prev

    return prev[:, -1].copy()


def levenshtein(a: str, b: str) -> int:
    """
    Levenshtein distance between two strings.

    The minimum number of single-character insertions, deletions and
    substitutions turning ``a`` into ``b``. Uses O(min(len(a), len(b)))
    space per row.
    """
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)
    return int(batch_distances(a, as_codes(b)[np.newaxis, :])[0])


def similarity(a: str, b: str) -> Optional[float]:
    """
    Normalized similarity in [0, 1] derived from the edit distance.

    Returns None when both strings are empty.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return None
    return 1.0 - levenshtein(a, b) / longest
