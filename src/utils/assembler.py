"""
Section assembler module for section segmentation.

Provides:
- Section record data model
- Pairing of finished accumulators with consumed titles
- Per-document metrics
- Pipeline orchestration (outline, pages, session, assembly)
"""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Sequence, Tuple, Union
from pathlib import Path

import numpy as np

from .segmenter import SegmentationSession, NoTitlesError
from .text import normalize_whitespace, normalize_titles

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class DocumentInfo:
    """Metadata forwarded verbatim into every section record."""
    title: str = ""
    topic: str = ""
    language: str = "de"


@dataclass
class SectionRecord:
    """One labeled section of a document."""
    title: str
    topic: str
    language: str
    text: str
    paragraph: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "topic": self.topic,
            "language": self.language,
            "text": self.text,
            "paragraph": self.paragraph
        }


@dataclass
class SegmentationMetrics:
    """Metrics about document segmentation."""
    pages_processed: int = 0
    titles_total: int = 0
    titles_matched: int = 0
    titles_rejected: int = 0
    mean_distance: float = 0.0
    front_matter_chars: int = 0
    processing_time_seconds: float = 0.0

    @property
    def titles_unmatched(self) -> int:
        return self.titles_total - self.titles_matched

    @property
    def match_rate(self) -> float:
        if self.titles_total == 0:
            return 0.0
        return self.titles_matched / self.titles_total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pages_processed": self.pages_processed,
            "titles": {
                "total": self.titles_total,
                "matched": self.titles_matched,
                "unmatched": self.titles_unmatched,
                "rejected": self.titles_rejected
            },
            "mean_distance": round(self.mean_distance, 3),
            "front_matter_chars": self.front_matter_chars,
            "processing_time_seconds": round(self.processing_time_seconds, 2)
        }


@dataclass
class SegmentationResult:
    """Sections of one document plus diagnostics."""
    info: DocumentInfo
    records: List[SectionRecord] = field(default_factory=list)
    front_matter: str = ""
    unmatched_titles: List[str] = field(default_factory=list)
    metrics: Optional[SegmentationMetrics] = None

    def to_records(self) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in self.records]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.info.title,
            "topic": self.info.topic,
            "language": self.info.language,
            "sections": self.to_records(),
            "front_matter": self.front_matter,
            "unmatched_titles": self.unmatched_titles,
            "metrics": self.metrics.to_dict() if self.metrics else {}
        }


# ============================================================================
# Result Assembly
# ============================================================================

def join_fragments(fragments: Sequence[str]) -> str:
    """Join fragments collected back to front into reading order."""
    return "".join(reversed(fragments))


def assemble_sections(
    accumulators: Sequence[Sequence[str]],
    consumed: Sequence[str],
    info: DocumentInfo
) -> Tuple[List[SectionRecord], List[str]]:
    """
    Pair finished accumulators with the titles they belong to.

    Accumulators beyond the number of consumed titles sit at the tail of the
    list: they hold content that precedes the first matched title and are
    discarded. The rest are paired in discovery order with the consumed
    titles, so records come out in reverse document order.

    Args:
        accumulators: Fragment lists, one per section plus the open one
        consumed: Matched titles in discovery order
        info: Document metadata for the records

    Returns:
        (records, discarded) where discarded holds the joined text of every
        trimmed accumulator, in document order
    """
    accumulators = list(accumulators)
    titles = deque(consumed)

    discarded = []
    while len(accumulators) > len(titles):
        discarded.append(join_fragments(accumulators.pop()))

    records = []
    for fragments in accumulators:
        records.append(SectionRecord(
            title=info.title,
            topic=info.topic,
            language=info.language,
            text=join_fragments(fragments),
            paragraph=titles.popleft()
        ))

    return records, discarded


# ============================================================================
# Document Segmenter
# ============================================================================

class DocumentSegmenter:
    """
    Orchestrates the segmentation pipeline for one document at a time.

    Coordinates:
    - Outline title normalization
    - Page text normalization
    - Reverse-order session over the pages
    - Record assembly and metrics
    """

    def __init__(
        self,
        language: str = "de",
        threshold_ratio: float = 0.1,
        min_title_length: int = 1,
        toc_anchor: Optional[str] = "Inhalt",
        top_level_only: bool = True,
        keep_front_matter: bool = False,
        front_matter_label: str = "Intro"
    ):
        self.language = language
        self.threshold_ratio = threshold_ratio
        self.min_title_length = min_title_length
        self.toc_anchor = toc_anchor
        self.top_level_only = top_level_only
        self.keep_front_matter = keep_front_matter
        self.front_matter_label = front_matter_label

    @classmethod
    def from_config(cls, config) -> "DocumentSegmenter":
        """Build a segmenter from a PipelineConfig."""
        return cls(
            language=config.output.language,
            threshold_ratio=config.match.threshold_ratio,
            min_title_length=config.match.min_title_length,
            toc_anchor=config.toc.anchor_title,
            top_level_only=config.toc.top_level_only,
            keep_front_matter=config.output.keep_front_matter,
            front_matter_label=config.output.front_matter_label
        )

    def segment(
        self,
        pages: Sequence[str],
        titles: Sequence[str],
        info: Optional[DocumentInfo] = None
    ) -> SegmentationResult:
        """
        Segment a document given its pages and titles in reading order.

        Args:
            pages: Raw text of each page, first page first
            titles: Section titles, first section first
            info: Metadata for the records (language defaults to ours)

        Returns:
            SegmentationResult with records in reverse document order

        Raises:
            NoTitlesError: If no usable title remains after normalization
        """
        start_time = time.time()
        if info is None:
            info = DocumentInfo(language=self.language)

        session = SegmentationSession(
            normalize_titles(titles),
            threshold_ratio=self.threshold_ratio,
            min_title_length=self.min_title_length
        )
        session.consume_pages(pages)

        unmatched = session.unmatched_titles
        distances = [m.distance for m in session.matches]
        accumulators, consumed = session.finish()
        records, discarded = assemble_sections(accumulators, consumed, info)
        front_matter = "".join(discarded)

        if self.keep_front_matter and front_matter:
            records.append(SectionRecord(
                title=info.title,
                topic=info.topic,
                language=info.language,
                text=front_matter,
                paragraph=self.front_matter_label
            ))

        metrics = SegmentationMetrics(
            pages_processed=session.pages_consumed,
            titles_total=len(session.backlog) + len(consumed),
            titles_matched=len(consumed),
            titles_rejected=len(session.rejected_titles),
            mean_distance=float(np.mean(distances)) if distances else 0.0,
            front_matter_chars=len(front_matter),
            processing_time_seconds=time.time() - start_time
        )

        if unmatched:
            logger.warning(
                f"{len(unmatched)} title(s) not found in {info.topic or 'document'}: "
                f"{unmatched}"
            )
        if len(records) == 1:
            logger.warning(f"Only one section found in {info.title or info.topic!r}")

        return SegmentationResult(
            info=info,
            records=records,
            front_matter=front_matter,
            unmatched_titles=unmatched,
            metrics=metrics
        )

    def process_pdf(self, pdf_path: Union[str, Path]) -> SegmentationResult:
        """
        Load a PDF and segment it by its outline.

        Raises:
            FileNotFoundError: If the PDF does not exist
            RuntimeError: If the PDF cannot be opened
            NoTitlesError: If the PDF has no usable outline titles
        """
        from .io import load_pdf_document, outline_titles

        pdf_path = Path(pdf_path)
        document = load_pdf_document(pdf_path)
        titles = outline_titles(
            document.toc,
            anchor_title=self.toc_anchor,
            top_level_only=self.top_level_only
        )

        if not titles:
            logger.warning(f"No outline titles: {document.title or pdf_path.name}")
            raise NoTitlesError(f"No outline titles in {pdf_path}")

        info = DocumentInfo(
            title=normalize_whitespace(document.title),
            topic=pdf_path.name,
            language=self.language
        )
        logger.info(f"Segmenting {pdf_path.name}: {document.page_count} pages, {len(titles)} titles")
        return self.segment(document.page_texts, titles, info)
