"""
Configuration and constants for the section segmentation pipeline.

This module provides:
- Global logging configuration
- Matching parameters (threshold ratio, minimum title length)
- Outline (table of contents) handling
- Output settings
"""

import os
from dataclasses import dataclass, field
from typing import Optional
import logging

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("pdf_sections")


# ============================================================================
# Processing Configuration
# ============================================================================

@dataclass
class MatchConfig:
    """Fuzzy title matching configuration."""
    # Tolerated edit operations per title character (rounded half-up)
    threshold_ratio: float = 0.1
    # Titles shorter than this (after normalization) are never searched
    min_title_length: int = 1


@dataclass
class TocConfig:
    """Outline (bookmark) handling configuration."""
    # Outline entries up to and including this one belong to the TOC page
    anchor_title: Optional[str] = "Inhalt"
    top_level_only: bool = True


@dataclass
class OutputConfig:
    """Output configuration."""
    language: str = "de"
    output_file: str = "output.json"
    # One compact array per document per line; otherwise a single JSON array
    json_lines: bool = True
    keep_front_matter: bool = False
    front_matter_label: str = "Intro"


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""
    match: MatchConfig = field(default_factory=MatchConfig)
    toc: TocConfig = field(default_factory=TocConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Global settings
    debug_mode: bool = False


# ============================================================================
# Default Configuration Instance
# ============================================================================

def get_config() -> PipelineConfig:
    """Get the default pipeline configuration with environment overrides."""
    config = PipelineConfig()

    language = os.environ.get("PDF_SECTIONS_LANGUAGE")
    if language:
        config.output.language = language

    ratio = os.environ.get("PDF_SECTIONS_THRESHOLD_RATIO")
    if ratio:
        try:
            config.match.threshold_ratio = float(ratio)
        except ValueError:
            logger.warning(f"Ignoring invalid PDF_SECTIONS_THRESHOLD_RATIO: {ratio!r}")

    # An empty value disables the anchor skip
    if "PDF_SECTIONS_TOC_ANCHOR" in os.environ:
        config.toc.anchor_title = os.environ["PDF_SECTIONS_TOC_ANCHOR"] or None

    if os.environ.get("PDF_SECTIONS_DEBUG", "").lower() == "true":
        config.debug_mode = True

    return config
