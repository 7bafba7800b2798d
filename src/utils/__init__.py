"""
Utility modules for the section segmentation pipeline.
"""

from .text import normalize_whitespace, normalize_titles, round_to_boundary, round_up_to_boundary
from .distance import levenshtein, batch_distances, similarity
from .matching import BoundaryMatch, locate_boundary, acceptance_threshold, is_accepted
from .segmenter import SegmentationSession, NoTitlesError
from .assembler import (
    DocumentSegmenter, DocumentInfo, SectionRecord, SegmentationResult,
    SegmentationMetrics, assemble_sections
)
from .io import load_pdf_document, outline_titles, save_json, append_json_line, ensure_dir
from .export import MarkdownExporter, DocumentExporter

__all__ = [
    # Text
    "normalize_whitespace", "normalize_titles", "round_to_boundary", "round_up_to_boundary",
    # Distance
    "levenshtein", "batch_distances", "similarity",
    # Matching
    "BoundaryMatch", "locate_boundary", "acceptance_threshold", "is_accepted",
    # Session
    "SegmentationSession", "NoTitlesError",
    # Assembly
    "DocumentSegmenter", "DocumentInfo", "SectionRecord", "SegmentationResult",
    "SegmentationMetrics", "assemble_sections",
    # IO
    "load_pdf_document", "outline_titles", "save_json", "append_json_line", "ensure_dir",
    # Export
    "MarkdownExporter", "DocumentExporter",
]
