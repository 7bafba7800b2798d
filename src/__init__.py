"""
PDF Section Segmentation
========================

Splits the text of outlined PDF documents into labeled sections by locating
approximate occurrences of the outline titles inside the extracted page text.

Main components:
- Whitespace normalization of titles and page text
- Levenshtein edit distance scoring
- Fuzzy boundary location with a length-proportional threshold
- Reverse-order (last page first) segmentation session
- Section record assembly and JSON / Markdown export
"""

__version__ = "1.0.0"
__author__ = "PDF Sections Team"
