"""
Boundary location and acceptance for fuzzy title matching.

Provides:
- BoundaryMatch result type
- Right-to-left sliding window search for the best title occurrence
- Length-proportional acceptance threshold (round half up)
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Dict, Any

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .distance import as_codes, batch_distances, DEFAULT_BATCH_SIZE
from .text import round_to_boundary, round_up_to_boundary

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class BoundaryMatch:
    """Best-scoring title window inside a text buffer."""
    title: str
    distance: Optional[int] = None
    offset: int = -1
    end: int = -1

    @property
    def found(self) -> bool:
        return self.distance is not None and self.offset >= 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "distance": self.distance,
            "offset": self.offset,
            "end": self.end,
        }


def not_found(title: str) -> BoundaryMatch:
    return BoundaryMatch(title=title)


# ============================================================================
# Boundary Locator
# ============================================================================

def locate_boundary(
    content: str,
    title: str,
    min_title_length: int = 1,
    batch_size: int = DEFAULT_BATCH_SIZE
) -> BoundaryMatch:
    """
    Find where a title most likely occurs in a text buffer.

    Every window of ``content`` with the title's length is scored against the
    title, from the rightmost window to the leftmost one. The first window
    reaching the minimum distance in that order wins, so ties resolve to the
    rightmost occurrence. Scanning stops as soon as an exact match is seen.

    Windows are scored in batches; a batch is only computed when no exact
    match was found to its right, which gives the same result as scoring
    one window at a time.

    Args:
        content: Remaining text buffer of the current page
        title: Title to look for
        min_title_length: Titles shorter than this are never matched
        batch_size: Number of windows scored per numpy batch

    Returns:
        BoundaryMatch; ``found`` is False when no window exists
    """
    if not isinstance(content, str) or not isinstance(title, str):
        raise TypeError("content and title must be strings")

    width = len(title)
    if width < max(min_title_length, 1) or width > len(content):
        return not_found(title)

    windows = sliding_window_view(as_codes(content), width)
    best_distance = None
    best_start = -1

    stop = len(windows)
    while stop > 0:
        start = max(0, stop - batch_size)
        # Reverse so index 0 is the rightmost window of the batch
        scores = batch_distances(title, windows[start:stop])[::-1]
        idx = int(np.argmin(scores))
        score = int(scores[idx])
        if best_distance is None or score < best_distance:
            best_distance = score
            best_start = stop - 1 - idx
        if best_distance == 0:
            break
        stop = start

    offset = round_to_boundary(content, best_start)
    end = round_up_to_boundary(content, best_start + width)
    return BoundaryMatch(title=title, distance=best_distance, offset=offset, end=end)


# ============================================================================
# Threshold Decider
# ============================================================================

def acceptance_threshold(title_length: int, ratio: float = 0.1) -> int:
    """
    Maximum tolerated edit distance for a title of the given length.

    ``round(ratio * title_length)`` with halves rounded up, computed in
    decimal arithmetic so that e.g. a 5 character title gets 1, not 0.
    """
    value = Decimal(str(ratio)) * title_length
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def is_accepted(
    match: BoundaryMatch,
    content_length: int,
    ratio: float = 0.1
) -> bool:
    """
    Decide whether a located boundary is a title occurrence.

    Not-found results and offsets outside the buffer are always rejected.
    """
    if not match.found:
        return False
    if not 0 <= match.offset <= match.end <= content_length:
        return False
    return match.distance <= acceptance_threshold(len(match.title), ratio)
