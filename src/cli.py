#!/usr/bin/env python
"""
Command-line interface for the PDF Section Segmentation pipeline.

Usage:
    python src/cli.py --input <pdf_or_dir> [<pdf_or_dir> ...] [options]

Examples:
    # Segment one PDF, appending its sections to output.json
    python src/cli.py --input document.pdf

    # Segment every PDF below a directory, English records
    python src/cli.py --input ./pdfs --language en --output sections.jsonl

    # Also write pretty JSON and Markdown per document
    python src/cli.py --input ./pdfs --output-dir ./out --format json markdown
"""

import sys
from pathlib import Path

# Add src directory to path for imports when running as script
_src_dir = Path(__file__).parent
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

import argparse
import logging
import time
from typing import List, Optional

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("pdf_sections")


def setup_argparser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="PDF Section Segmentation - Split outlined PDFs into labeled sections",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Segment a PDF:
    python -m src.cli --input document.pdf

  Segment a directory tree of PDFs:
    python -m src.cli --input ./pdfs --output sections.jsonl

  Keep the content before the first section as an "Intro" record:
    python -m src.cli --input document.pdf --keep-front-matter
        """
    )

    # Required arguments
    parser.add_argument(
        "--input", "-i",
        required=True,
        nargs="+",
        help="Input PDF file(s) or directories (searched recursively)"
    )

    # Optional arguments
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="JSON Lines output file, one array of sections per document (default: output.json)"
    )

    parser.add_argument(
        "--json-array",
        action="store_true",
        help="Write the output file as one JSON array of per-document arrays instead of JSON Lines"
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for per-document exports (see --format)"
    )

    parser.add_argument(
        "--format", "-f",
        nargs="+",
        default=["json"],
        choices=["json", "markdown", "all"],
        help="Per-document export format(s) when --output-dir is set (default: json)"
    )

    parser.add_argument(
        "--language", "-l",
        default=None,
        help="Language tag written into every record (default: de)"
    )

    parser.add_argument(
        "--threshold-ratio",
        type=float,
        default=None,
        help="Tolerated edit operations per title character (default: 0.1)"
    )

    parser.add_argument(
        "--toc-anchor",
        default=None,
        help="Outline entry marking the table of contents (default: Inhalt)"
    )

    parser.add_argument(
        "--no-toc-anchor",
        action="store_true",
        help="Use every top-level outline entry as a title"
    )

    parser.add_argument(
        "--all-levels",
        action="store_true",
        help="Use outline entries of every level, not only top-level ones"
    )

    parser.add_argument(
        "--keep-front-matter",
        action="store_true",
        help="Emit content preceding the first section as an extra record"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (re-raise errors)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0"
    )

    return parser


def check_dependencies() -> bool:
    """Check if required dependencies are available."""
    missing = []

    try:
        import numpy
    except ImportError:
        missing.append("numpy")

    try:
        import fitz
    except ImportError:
        missing.append("pymupdf")

    if missing:
        logger.error("Missing required dependencies:")
        for dep in missing:
            logger.error(f"  - {dep}")
        logger.error("\nInstall with: pip install -e .")
        return False

    return True


def build_config(args):
    """Merge command-line overrides into the environment-derived config."""
    from config import get_config

    config = get_config()

    if args.output:
        config.output.output_file = args.output
    if args.json_array:
        config.output.json_lines = False
    if args.language:
        config.output.language = args.language
    if args.threshold_ratio is not None:
        config.match.threshold_ratio = args.threshold_ratio
    if args.no_toc_anchor:
        config.toc.anchor_title = None
    elif args.toc_anchor:
        config.toc.anchor_title = args.toc_anchor
    if args.all_levels:
        config.toc.top_level_only = False
    if args.keep_front_matter:
        config.output.keep_front_matter = True
    if args.debug:
        config.debug_mode = True

    return config


def run_pipeline(args) -> int:
    """Run the segmentation pipeline over every input document."""
    from utils.io import iter_pdf_files, append_json_line, save_json, ensure_dir, ProcessingProgress
    from utils.assembler import DocumentSegmenter
    from utils.segmenter import NoTitlesError
    from utils.export import DocumentExporter

    start_time = time.time()
    config = build_config(args)

    pdf_files = list(iter_pdf_files(args.input))
    if not pdf_files:
        logger.error("No PDF files found")
        return 1

    output_file = Path(config.output.output_file)
    if output_file.exists():
        output_file.unlink()

    formats = args.format
    if "all" in formats:
        formats = ["json", "markdown"]

    output_dir: Optional[Path] = None
    if args.output_dir:
        output_dir = ensure_dir(args.output_dir)

    segmenter = DocumentSegmenter.from_config(config)
    progress = ProcessingProgress(total_documents=len(pdf_files))
    sections_total = 0
    documents = []

    logger.info(f"Found {len(pdf_files)} PDF file(s)")

    for pdf_path in pdf_files:
        try:
            result = segmenter.process_pdf(pdf_path)
        except NoTitlesError as e:
            progress.add_skipped(pdf_path.name, str(e))
            continue
        except Exception as e:
            progress.add_failure(pdf_path.name, str(e))
            if config.debug_mode:
                raise
            continue

        if config.output.json_lines:
            append_json_line(result.to_records(), output_file)
        else:
            documents.append(result.to_records())
        if output_dir is not None:
            DocumentExporter(output_dir, pdf_path.stem).export(result, formats)

        sections_total += len(result.records)
        progress.complete_document()

    if not config.output.json_lines:
        save_json(documents, output_file)

    elapsed = time.time() - start_time

    if not args.quiet:
        print("\n" + "="*60)
        print("SECTION SEGMENTATION COMPLETE")
        print("="*60)
        print(f"Output: {output_file}")
        print(f"Documents segmented: {progress.processed_documents}/{progress.total_documents}")
        print(f"Documents skipped (no outline): {len(progress.skipped)}")
        print(f"Documents failed: {len(progress.failed)}")
        print(f"Sections written: {sections_total}")
        print(f"Processing time: {elapsed:.2f}s")
        print("="*60)

    if progress.failed and len(progress.failed) == progress.total_documents:
        return 1
    return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = setup_argparser()
    args = parser.parse_args(argv)

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    # Check dependencies
    if not check_dependencies():
        sys.exit(1)

    # Run pipeline
    try:
        exit_code = run_pipeline(args)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.debug:
            raise
        sys.exit(1)


if __name__ == "__main__":
    main()
