"""
Tests for section assembly and the document segmenter.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class TestAssembleSections:
    """Test pairing accumulators with consumed titles."""

    def test_pairs_in_discovery_order(self):
        from utils.assembler import assemble_sections, DocumentInfo

        info = DocumentInfo(title="Doc", topic="doc.pdf", language="de")
        records, discarded = assemble_sections(
            [[" content two"], [" content one"], ["noise"]],
            ["Methods", "Intro"],
            info
        )

        assert [(r.paragraph, r.text) for r in records] == [
            ("Methods", " content two"),
            ("Intro", " content one"),
        ]
        assert discarded == ["noise"]

    def test_trailing_accumulators_are_discarded(self):
        """Regression: the tail (leading document content) is trimmed, not the head."""
        from utils.assembler import assemble_sections, DocumentInfo

        records, discarded = assemble_sections(
            [["a"], ["b"], ["c"], ["d"]],
            ["X", "Y"],
            DocumentInfo()
        )

        assert [(r.paragraph, r.text) for r in records] == [("X", "a"), ("Y", "b")]
        assert discarded == ["d", "c"]

    def test_fragments_joined_in_reading_order(self):
        from utils.assembler import assemble_sections, DocumentInfo

        records, _ = assemble_sections([["page 3 ", "page 2 "], []], ["Title"], DocumentInfo())

        assert records[0].text == "page 2 page 3 "

    def test_metadata_forwarded(self):
        from utils.assembler import assemble_sections, DocumentInfo

        info = DocumentInfo(title="Handbuch", topic="handbuch.pdf", language="en")
        records, _ = assemble_sections([["x"], []], ["Kapitel"], info)
        data = records[0].to_dict()

        assert set(data) == {"title", "topic", "language", "text", "paragraph"}
        assert data["title"] == "Handbuch"
        assert data["topic"] == "handbuch.pdf"
        assert data["language"] == "en"

    def test_no_consumed_titles(self):
        from utils.assembler import assemble_sections, DocumentInfo

        records, discarded = assemble_sections([["everything"]], [], DocumentInfo())

        assert records == []
        assert discarded == ["everything"]


class TestDocumentSegmenter:
    """Test end-to-end segmentation of in-memory documents."""

    def test_single_page_scenario(self):
        from utils.assembler import DocumentSegmenter, DocumentInfo

        segmenter = DocumentSegmenter()
        info = DocumentInfo(title="Paper", topic="paper.pdf", language="en")
        result = segmenter.segment(
            ["noise Intro content one Methods content two"],
            ["Intro", "Methods"],
            info
        )

        assert result.to_records() == [
            {"title": "Paper", "topic": "paper.pdf", "language": "en",
             "text": " content two", "paragraph": "Methods"},
            {"title": "Paper", "topic": "paper.pdf", "language": "en",
             "text": " content one", "paragraph": "Intro"},
        ]
        assert result.front_matter == "noise"
        assert result.unmatched_titles == []

    def test_multi_page_document(self):
        from utils.assembler import DocumentSegmenter

        pages = [
            "Cover page\n",
            "1 Introduction\nWe study things.\n",
            "More about things.\n2 Results\nThey work.\n",
        ]
        result = DocumentSegmenter().segment(pages, ["1 Introduction", "2 Results"])

        texts = {r.paragraph: r.text for r in result.records}
        assert [r.paragraph for r in result.records] == ["2 Results", "1 Introduction"]
        assert texts["2 Results"] == " They work. "
        assert texts["1 Introduction"] == " We study things. More about things."
        assert result.front_matter == "Cover page "

    def test_default_language(self):
        from utils.assembler import DocumentSegmenter

        result = DocumentSegmenter(language="fr").segment(["Intro a"], ["Intro"])

        assert result.records[0].language == "fr"

    def test_titles_are_normalized(self):
        from utils.assembler import DocumentSegmenter

        result = DocumentSegmenter().segment(["x 1. Intro body"], ["1.\n Intro"])

        assert result.records[0].paragraph == "1. Intro"
        assert result.records[0].text == " body"

    def test_keep_front_matter(self):
        from utils.assembler import DocumentSegmenter

        segmenter = DocumentSegmenter(keep_front_matter=True, front_matter_label="Preface")
        result = segmenter.segment(["noise Intro one Methods two"], ["Intro", "Methods"])

        assert [r.paragraph for r in result.records] == ["Methods", "Intro", "Preface"]
        assert result.records[-1].text == "noise"

    def test_missing_title(self):
        from utils.assembler import DocumentSegmenter

        result = DocumentSegmenter().segment(
            ["alpha Intro beta Methods gamma"],
            ["Intro", "Methods", "Appendix Z"]
        )

        assert result.records == []
        assert result.unmatched_titles == ["Intro", "Methods", "Appendix Z"]

    def test_metrics(self):
        from utils.assembler import DocumentSegmenter

        result = DocumentSegmenter().segment(
            ["noise Intro content one Metbods content two"],
            ["Intro", "Methods"]
        )
        metrics = result.metrics

        assert metrics.pages_processed == 1
        assert metrics.titles_total == 2
        assert metrics.titles_matched == 2
        assert metrics.titles_unmatched == 0
        assert metrics.mean_distance == pytest.approx(0.5)
        assert metrics.front_matter_chars == 5
        assert metrics.to_dict()["titles"]["matched"] == 2

    def test_no_titles(self):
        from utils.assembler import DocumentSegmenter
        from utils.segmenter import NoTitlesError

        with pytest.raises(NoTitlesError):
            DocumentSegmenter().segment(["some text"], [])

    def test_from_config(self):
        from config import PipelineConfig
        from utils.assembler import DocumentSegmenter

        config = PipelineConfig()
        config.output.language = "en"
        config.match.threshold_ratio = 0.2
        config.toc.anchor_title = None

        segmenter = DocumentSegmenter.from_config(config)

        assert segmenter.language == "en"
        assert segmenter.threshold_ratio == 0.2
        assert segmenter.toc_anchor is None
