"""
Export module for section segmentation.

Provides:
- Markdown export of a segmented document
- Per-document export to JSON and Markdown files
"""

import logging
from pathlib import Path
from typing import Dict, List, Union

from .assembler import SegmentationResult, SectionRecord
from .io import save_json

logger = logging.getLogger(__name__)


# ============================================================================
# Markdown Exporter
# ============================================================================

class MarkdownExporter:
    """Export segmented sections to Markdown format."""

    def __init__(
        self,
        reading_order: bool = True,
        include_front_matter: bool = False
    ):
        """
        Args:
            reading_order: Emit sections first to last instead of in the
                order they were discovered (last to first)
            include_front_matter: Emit discarded leading content first
        """
        self.reading_order = reading_order
        self.include_front_matter = include_front_matter

    def export(
        self,
        result: SegmentationResult,
        output_path: Union[str, Path]
    ) -> Path:
        """
        Export a segmentation result to a Markdown file.

        Args:
            result: SegmentationResult
            output_path: Output file path

        Returns:
            Path to the generated Markdown file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(self.to_markdown(result))

        logger.info(f"Exported Markdown to: {output_path}")
        return output_path

    def to_markdown(self, result: SegmentationResult) -> str:
        """Generate Markdown from a segmentation result."""
        lines = []

        heading = result.info.title or result.info.topic
        if heading:
            lines.append(f"# {heading}")
            lines.append("")

        if self.include_front_matter and result.front_matter.strip():
            lines.append(result.front_matter.strip())
            lines.append("")

        records: List[SectionRecord] = list(result.records)
        if self.reading_order:
            records.reverse()

        for record in records:
            lines.append(f"## {record.paragraph}")
            lines.append("")
            if record.text.strip():
                lines.append(record.text.strip())
                lines.append("")

        return "\n".join(lines)


# ============================================================================
# Document Exporter
# ============================================================================

class DocumentExporter:
    """Convenience class for exporting one document to multiple formats."""

    def __init__(self, output_dir: Union[str, Path], basename: str):
        self.output_dir = Path(output_dir)
        self.basename = basename

    def export(self, result: SegmentationResult, formats: List[str]) -> Dict[str, Path]:
        """
        Export a result to the requested formats.

        Args:
            result: SegmentationResult
            formats: Any of 'json', 'markdown'

        Returns:
            Mapping of format name to written path
        """
        outputs = {}

        if "json" in formats:
            outputs["json"] = save_json(
                result.to_dict(),
                self.output_dir / f"{self.basename}.json"
            )

        if "markdown" in formats:
            outputs["markdown"] = MarkdownExporter().export(
                result,
                self.output_dir / f"{self.basename}.md"
            )

        unknown = set(formats) - {"json", "markdown"}
        for fmt in sorted(unknown):
            logger.warning(f"Unknown export format: {fmt}")

        return outputs
