"""
I/O utilities for the section segmentation pipeline.

Handles:
- PDF loading (page text, outline, metadata title) via PyMuPDF
- Outline title selection
- Input detection and recursive directory traversal
- JSON / JSON Lines serialization
"""

import json
import logging
from pathlib import Path
from typing import List, Union, Optional, Any, Iterable, Iterator, Sequence, Tuple
from dataclasses import dataclass, field, asdict

from .text import normalize_whitespace

logger = logging.getLogger(__name__)


# ============================================================================
# PDF Loading
# ============================================================================

@dataclass
class TocEntry:
    """One outline (bookmark) entry."""
    level: int
    title: str
    page: int


@dataclass
class PdfDocument:
    """Text content of a PDF as needed for segmentation."""
    path: Path
    title: str = ""
    page_texts: List[str] = field(default_factory=list)
    toc: List[TocEntry] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.page_texts)


def load_pdf_document(pdf_path: Union[str, Path]) -> PdfDocument:
    """
    Read page texts, outline and metadata title from a PDF using PyMuPDF.

    Args:
        pdf_path: Path to the PDF file

    Returns:
        PdfDocument with one raw text string per page, in page order

    Raises:
        FileNotFoundError: If PDF file doesn't exist
        ImportError: If PyMuPDF is not installed
        RuntimeError: If the PDF cannot be opened
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise FileNotFoundError(f"PDF file not found: {pdf_path}")

    try:
        import fitz
    except ImportError:
        raise ImportError(
            "PyMuPDF is required. Install with: pip install pymupdf"
        )

    try:
        doc = fitz.open(str(pdf_path))
    except Exception as e:
        raise RuntimeError(f"Failed to open PDF {pdf_path}: {e}")

    try:
        metadata = doc.metadata or {}
        page_texts = [page.get_text() for page in doc]
        toc = [
            TocEntry(level=int(item[0]), title=str(item[1] or ""), page=int(item[2]))
            for item in doc.get_toc(simple=True)
            if len(item) >= 3
        ]
    finally:
        doc.close()

    logger.debug(f"Loaded {pdf_path}: {len(page_texts)} pages, {len(toc)} outline entries")
    return PdfDocument(
        path=pdf_path,
        title=metadata.get("title") or "",
        page_texts=page_texts,
        toc=toc
    )


def outline_titles(
    toc: Sequence[TocEntry],
    anchor_title: Optional[str] = "Inhalt",
    top_level_only: bool = True
) -> List[str]:
    """
    Select section titles from a PDF outline, in document order.

    Titles are whitespace-normalized. When ``anchor_title`` is present in the
    selected entries, it and every entry before it are dropped: those point
    into the table of contents itself rather than at sections. Without the
    anchor all entries are kept.

    Args:
        toc: Outline entries in document order
        anchor_title: Title of the table-of-contents entry, or None
        top_level_only: Only use level 1 entries

    Returns:
        List of normalized titles
    """
    titles = [
        normalize_whitespace(entry.title)
        for entry in toc
        if not top_level_only or entry.level == 1
    ]

    if anchor_title is not None:
        anchor = normalize_whitespace(anchor_title)
        if anchor in titles:
            titles = titles[titles.index(anchor) + 1:]
        else:
            logger.debug(f"Outline anchor {anchor!r} not found, keeping all titles")

    return titles


# ============================================================================
# JSON Serialization
# ============================================================================

class EnhancedJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles dataclasses and paths."""

    def default(self, obj):
        if hasattr(obj, 'to_dict'):
            return obj.to_dict()
        if hasattr(obj, '__dataclass_fields__'):
            return asdict(obj)
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


def save_json(
    data: Any,
    output_path: Union[str, Path],
    indent: int = 2,
    ensure_ascii: bool = False
) -> Path:
    """
    Save data to a JSON file.

    Args:
        data: Data to serialize (dict, list, dataclass, etc.)
        output_path: Path to save the JSON file
        indent: Indentation level for pretty printing
        ensure_ascii: If True, escape non-ASCII characters

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii, cls=EnhancedJSONEncoder)

    logger.debug(f"Saved JSON: {output_path}")
    return output_path


def append_json_line(
    data: Any,
    output_path: Union[str, Path],
    ensure_ascii: bool = False
) -> Path:
    """Append one compact JSON value as a line to a file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'a', encoding='utf-8') as f:
        f.write(json.dumps(data, ensure_ascii=ensure_ascii, cls=EnhancedJSONEncoder))
        f.write("\n")

    return output_path


def load_json(json_path: Union[str, Path]) -> Any:
    """
    Load data from a JSON file.

    Args:
        json_path: Path to the JSON file

    Returns:
        Parsed JSON data
    """
    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"JSON file not found: {json_path}")

    with open(json_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_json_lines(json_path: Union[str, Path]) -> List[Any]:
    """Load every non-empty line of a JSON Lines file."""
    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"JSON Lines file not found: {json_path}")

    with open(json_path, 'r', encoding='utf-8') as f:
        return [json.loads(line) for line in f if line.strip()]


# ============================================================================
# Input Detection
# ============================================================================

def detect_input_type(input_path: Union[str, Path]) -> str:
    """
    Detect the type of input file or directory.

    Args:
        input_path: Path to file or directory

    Returns:
        One of: 'pdf', 'directory', 'unknown'
    """
    input_path = Path(input_path)

    if input_path.is_dir():
        return 'directory'

    if input_path.is_file() and input_path.suffix.lower() == '.pdf':
        return 'pdf'

    return 'unknown'


def iter_pdf_files(paths: Iterable[Union[str, Path]]) -> Iterator[Path]:
    """
    Yield every PDF named by the given paths.

    Directories are traversed recursively in sorted order; other inputs
    that are not PDFs are skipped with a warning.
    """
    for path in paths:
        path = Path(path)
        input_type = detect_input_type(path)

        if input_type == 'pdf':
            yield path
        elif input_type == 'directory':
            for child in sorted(path.rglob("*")):
                if child.is_file() and child.suffix.lower() == '.pdf':
                    yield child
        else:
            logger.warning(f"Skipping unsupported input: {path}")


def ensure_dir(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory

    Returns:
        Path object for the directory
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


# ============================================================================
# Progress Tracking
# ============================================================================

@dataclass
class ProcessingProgress:
    """Track progress over a batch of documents."""
    total_documents: int = 0
    processed_documents: int = 0
    skipped: List[Tuple[str, str]] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    def complete_document(self):
        self.processed_documents += 1

    def add_skipped(self, name: str, reason: str):
        self.skipped.append((name, reason))
        logger.warning(f"Skipped {name}: {reason}")

    def add_failure(self, name: str, error: str):
        self.failed.append((name, error))
        logger.error(f"Failed {name}: {error}")
