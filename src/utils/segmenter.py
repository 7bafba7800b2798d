"""
Reverse-order segmentation session.

A session owns the title backlog, the per-section text accumulators and the
record of consumed titles for one document. Pages are fed last page first;
within a page the remaining buffer is searched repeatedly for the next
expected title, shrinking from the right after each accepted match.
"""

import logging
from collections import deque
from typing import Deque, List, Optional, Sequence

from .matching import BoundaryMatch, locate_boundary, is_accepted, acceptance_threshold
from .text import normalize_whitespace

logger = logging.getLogger(__name__)


class NoTitlesError(ValueError):
    """Raised when a document has no usable titles to segment by."""


class SegmentationSession:
    """
    Stateful driver splitting page text into sections.

    State:
    - backlog: titles still to find; ``backlog[-1]`` is the next one expected
      (the title nearest the end of the document)
    - accumulators: one fragment list per matched title plus the open one;
      fragments are appended in scan order, i.e. back to front
    - consumed: matched titles in the order they were found
    """

    def __init__(
        self,
        titles: Sequence[str],
        threshold_ratio: float = 0.1,
        min_title_length: int = 1
    ):
        """
        Args:
            titles: Normalized section titles in document (reading) order
            threshold_ratio: Tolerated edit operations per title character
            min_title_length: Shorter titles are dropped from the backlog
        """
        if isinstance(titles, str):
            raise TypeError("titles must be a sequence of strings, not a string")
        for title in titles:
            if not isinstance(title, str):
                raise TypeError(f"Title must be str, got {type(title).__name__}")

        self.threshold_ratio = threshold_ratio
        self.min_title_length = max(min_title_length, 1)

        self.backlog: List[str] = []
        self.rejected_titles: List[str] = []
        for title in titles:
            if len(title.strip()) < self.min_title_length:
                logger.warning(f"Skipping degenerate title: {title!r}")
                self.rejected_titles.append(title)
            else:
                self.backlog.append(title)

        if not self.backlog:
            raise NoTitlesError("No titles to segment by")

        self._title_count = len(self.backlog)
        self.accumulators: List[List[str]] = [[]]
        self.consumed: Deque[str] = deque()
        self.matches: List[BoundaryMatch] = []
        self.pages_consumed = 0
        self._finished = False

    @property
    def done(self) -> bool:
        """True once every title has been found."""
        return not self.backlog

    def consume_page(self, page_text: str) -> int:
        """
        Segment one page.

        Pages must be supplied from the last page of the document to the
        first, with whitespace already normalized.

        Args:
            page_text: Normalized text of the page

        Returns:
            Number of section boundaries found on the page
        """
        if self._finished:
            raise RuntimeError("Session already finished")
        if not isinstance(page_text, str):
            raise TypeError(f"Page text must be str, got {type(page_text).__name__}")

        self.pages_consumed += 1
        if not self.backlog:
            # Everything left belongs to the leading content
            if page_text:
                self.accumulators[-1].append(page_text)
            return 0

        remaining = page_text
        found = 0
        while self.backlog:
            title = self.backlog[-1]
            match = locate_boundary(remaining, title, self.min_title_length)

            if not is_accepted(match, len(remaining), self.threshold_ratio):
                logger.debug(
                    f"No boundary for {title!r} (distance {match.distance}, "
                    f"threshold {acceptance_threshold(len(title), self.threshold_ratio)})"
                )
                if remaining:
                    self.accumulators[-1].append(remaining)
                break

            logger.debug(
                f"Boundary for {title!r} at {match.offset} (distance {match.distance})"
            )
            if match.end < len(remaining):
                self.accumulators[-1].append(remaining[match.end:])
            # The separator before the title belongs to the boundary
            remaining = remaining[:match.offset].rstrip(" ")
            self.backlog.pop()
            self.accumulators.append([])
            self.consumed.append(title)
            self.matches.append(match)
            found += 1

        if not self.backlog and remaining:
            # Leading content of the document, kept for diagnostics
            self.accumulators[-1].append(remaining)

        return found

    def consume_pages(self, pages: Sequence[str], normalize: bool = True) -> int:
        """
        Segment a whole document given its pages in reading order.

        Pages are fed last page first; whitespace is collapsed unless
        ``normalize`` is False.
        """
        found = 0
        for page_text in reversed(pages):
            if normalize:
                page_text = normalize_whitespace(page_text)
            found += self.consume_page(page_text)
        return found

    def finish(self):
        """
        Close the session and hand its state to the assembler.

        Returns:
            (accumulators, consumed) where each accumulator is the list of
            fragments collected for one section
        """
        if self._finished:
            raise RuntimeError("Session already finished")
        self._finished = True
        return self.accumulators, self.consumed

    @property
    def unmatched_titles(self) -> List[str]:
        """Titles never found, in document order."""
        return list(self.backlog)

    def check_invariants(self) -> Optional[str]:
        """Return a description of the first violated invariant, if any."""
        if len(self.accumulators) != len(self.consumed) + 1:
            return (
                f"{len(self.accumulators)} accumulators for "
                f"{len(self.consumed)} consumed titles"
            )
        if len(self.consumed) + len(self.backlog) != self._title_count:
            return "Backlog and consumed titles do not add up to the title list"
        return None
