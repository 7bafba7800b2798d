#!/usr/bin/env python
"""
Evaluation script for the PDF Section Segmentation pipeline.

Computes metrics on segmentation output and compares against expected
sections.

Usage:
    python eval.py --input <output.json> [--expected <expected.json>]
    python eval.py --input <output.json> --report <report.json>

Both files are JSON Lines: one array of section records per document.
"""

import argparse
import logging
from pathlib import Path
from dataclasses import dataclass, asdict
from typing import List, Optional, Dict, Any
import sys

# Add src directory to path for imports when running as script
sys.path.insert(0, str(Path(__file__).parent / "src"))

from utils.distance import similarity
from utils.io import load_json_lines, save_json

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@dataclass
class EvaluationMetrics:
    """Evaluation metrics for one segmented document."""
    sections_total: int = 0
    empty_sections: int = 0
    text_length_avg: float = 0.0

    # Against expected output
    label_precision: Optional[float] = None
    label_recall: Optional[float] = None
    text_similarity_avg: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def group_by_topic(documents: List[List[Dict[str, Any]]]) -> Dict[str, List[Dict[str, Any]]]:
    """Index per-document record arrays by their topic."""
    grouped = {}
    for index, records in enumerate(documents):
        if not records:
            continue
        topic = records[0].get("topic") or f"document_{index}"
        grouped[topic] = records
    return grouped


def evaluate_records(records: List[Dict[str, Any]]) -> EvaluationMetrics:
    """Evaluate the sections of a single document."""
    metrics = EvaluationMetrics()
    metrics.sections_total = len(records)

    lengths = [len(r.get("text", "").strip()) for r in records]
    metrics.empty_sections = sum(1 for n in lengths if n == 0)
    if lengths:
        metrics.text_length_avg = sum(lengths) / len(lengths)

    return metrics


def evaluate_against_expected(
    records: List[Dict[str, Any]],
    expected: List[Dict[str, Any]]
) -> EvaluationMetrics:
    """Evaluate sections against expected sections of the same document."""
    metrics = evaluate_records(records)

    actual = {r.get("paragraph"): r.get("text", "") for r in records}
    wanted = {r.get("paragraph"): r.get("text", "") for r in expected}

    common = set(actual) & set(wanted)
    if actual:
        metrics.label_precision = len(common) / len(actual)
    if wanted:
        metrics.label_recall = len(common) / len(wanted)

    scores = []
    for label in common:
        score = similarity(wanted[label].strip(), actual[label].strip())
        scores.append(1.0 if score is None else score)
    if scores:
        metrics.text_similarity_avg = sum(scores) / len(scores)

    return metrics


def print_metrics(metrics: EvaluationMetrics, name: str = "Document"):
    """Print metrics in a formatted way."""
    print(f"\n{'='*60}")
    print(f"Evaluation Results: {name}")
    print('='*60)

    print(f"  Sections: {metrics.sections_total}")
    print(f"  Empty sections: {metrics.empty_sections}")
    print(f"  Average text length: {metrics.text_length_avg:.0f}")

    if metrics.label_recall is not None:
        print("\n  Against expected:")
        print(f"  Label precision: {metrics.label_precision or 0.0:.1%}")
        print(f"  Label recall: {metrics.label_recall:.1%}")
        if metrics.text_similarity_avg is not None:
            print(f"  Text similarity: {metrics.text_similarity_avg:.1%}")

    print('='*60)


def generate_report(results: Dict[str, EvaluationMetrics]) -> Dict[str, Any]:
    """Generate a summary report from multiple evaluations."""
    if not results:
        return {"error": "No results to report"}

    total_docs = len(results)
    recalls = [m.label_recall for m in results.values() if m.label_recall is not None]
    similarities = [
        m.text_similarity_avg for m in results.values()
        if m.text_similarity_avg is not None
    ]

    return {
        "summary": {
            "documents_evaluated": total_docs,
            "total_sections": sum(m.sections_total for m in results.values()),
            "empty_sections": sum(m.empty_sections for m in results.values()),
            "average_label_recall": round(sum(recalls) / len(recalls), 3) if recalls else None,
            "average_text_similarity": (
                round(sum(similarities) / len(similarities), 3) if similarities else None
            )
        },
        "individual_results": {
            name: metrics.to_dict()
            for name, metrics in results.items()
        }
    }


def evaluate_files(input_path: Path, expected_path: Optional[Path] = None) -> Dict[str, EvaluationMetrics]:
    """Evaluate every document of an output file."""
    documents = group_by_topic(load_json_lines(input_path))
    expected = group_by_topic(load_json_lines(expected_path)) if expected_path else {}

    results = {}
    for topic, records in documents.items():
        if topic in expected:
            results[topic] = evaluate_against_expected(records, expected[topic])
        else:
            results[topic] = evaluate_records(records)
    return results


def main():
    parser = argparse.ArgumentParser(
        description="Evaluate PDF Section Segmentation outputs"
    )

    parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="Path to segmentation output (JSON Lines)"
    )

    parser.add_argument(
        "--expected", "-e",
        type=Path,
        help="Path to expected output (JSON Lines) for comparison"
    )

    parser.add_argument(
        "--report", "-r",
        type=Path,
        help="Output path for evaluation report JSON"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress printed output"
    )

    args = parser.parse_args()

    if not args.input.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1
    if args.expected and not args.expected.exists():
        logger.error(f"Expected file not found: {args.expected}")
        return 1

    results = evaluate_files(args.input, args.expected)

    if not args.quiet:
        for name, metrics in results.items():
            print_metrics(metrics, name)

    if args.report and results:
        report = generate_report(results)
        save_json(report, args.report)
        logger.info(f"Report saved to: {args.report}")

        if not args.quiet:
            print("\nSummary:")
            for key, value in report["summary"].items():
                print(f"  {key}: {value}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
