"""
Tests for boundary location and the acceptance threshold.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class TestAcceptanceThreshold:
    """Test the length-proportional threshold."""

    @pytest.mark.parametrize("length,expected", [
        (0, 0),
        (4, 0),
        (5, 1),    # 0.5 rounds half up
        (12, 1),
        (14, 1),
        (15, 2),
        (25, 3),
        (100, 10),
    ])
    def test_rounding(self, length, expected):
        from utils.matching import acceptance_threshold

        assert acceptance_threshold(length) == expected

    def test_monotonic(self):
        """Longer titles never get a lower threshold."""
        from utils.matching import acceptance_threshold

        values = [acceptance_threshold(n) for n in range(300)]
        assert all(a <= b for a, b in zip(values, values[1:]))

    def test_custom_ratio(self):
        from utils.matching import acceptance_threshold

        assert acceptance_threshold(10, ratio=0.25) == 3
        assert acceptance_threshold(10, ratio=0.0) == 0


class TestLocateBoundary:
    """Test the right-to-left window search."""

    def test_exact_match(self):
        from utils.matching import locate_boundary

        match = locate_boundary("foo Methods bar", "Methods")

        assert match.found
        assert match.distance == 0
        assert match.offset == 4
        assert match.end == 11

    def test_rightmost_exact_match_wins(self):
        from utils.matching import locate_boundary

        match = locate_boundary("Intro x Intro", "Intro")

        assert match.distance == 0
        assert match.offset == 8

    def test_rightmost_fuzzy_tie_wins(self):
        """Equal distances keep the first window seen from the right."""
        from utils.matching import locate_boundary

        match = locate_boundary("Metxods Methoxs", "Methods")

        assert match.distance == 1
        assert match.offset == 8

    def test_better_match_to_the_left(self):
        from utils.matching import locate_boundary

        match = locate_boundary("Methods and Metxods", "Methods")

        assert match.distance == 0
        assert match.offset == 0

    def test_fuzzy_match(self):
        from utils.matching import locate_boundary

        match = locate_boundary("noise Metbods rest", "Methods")

        assert match.distance == 1
        assert match.offset == 6

    def test_title_longer_than_content(self):
        from utils.matching import locate_boundary

        match = locate_boundary("short", "A much longer title")

        assert not match.found
        assert match.distance is None
        assert match.offset == -1

    def test_empty_title_not_found(self):
        from utils.matching import locate_boundary

        assert not locate_boundary("some content", "").found

    def test_min_title_length(self):
        from utils.matching import locate_boundary

        assert not locate_boundary("a b c", "b", min_title_length=2).found
        assert locate_boundary("a b c", "b", min_title_length=1).found

    def test_rejects_non_strings(self):
        from utils.matching import locate_boundary

        with pytest.raises(TypeError):
            locate_boundary(None, "Intro")

    @pytest.mark.parametrize("batch_size", [1, 2, 3, 7, 512])
    def test_batch_size_does_not_change_result(self, batch_size):
        from utils.matching import locate_boundary

        content = "Results one Resutls two Rezults three end"
        expected = locate_boundary(content, "Results")
        match = locate_boundary(content, "Results", batch_size=batch_size)

        assert match == expected

    def test_offset_not_inside_cluster(self):
        """A window starting on a combining mark is moved to its base."""
        from utils.matching import locate_boundary

        match = locate_boundary("ae\u0301b", "\u0301b")

        assert match.distance == 0
        assert match.offset == 1
        assert match.end == 4

    def test_end_not_inside_cluster(self):
        """A window ending before a combining mark extends past it."""
        from utils.matching import locate_boundary

        match = locate_boundary("x Cafe\u0301 body", "Cafe")

        assert match.distance == 0
        assert match.offset == 2
        assert match.end == 7


class TestIsAccepted:
    """Test the accept/reject decision."""

    def test_within_threshold(self):
        from utils.matching import BoundaryMatch, is_accepted

        match = BoundaryMatch(title="Methods", distance=1, offset=0, end=7)
        assert is_accepted(match, content_length=20)

    def test_above_threshold(self):
        from utils.matching import BoundaryMatch, is_accepted

        match = BoundaryMatch(title="Methods", distance=2, offset=0, end=7)
        assert not is_accepted(match, content_length=20)

    def test_not_found(self):
        from utils.matching import BoundaryMatch, is_accepted

        assert not is_accepted(BoundaryMatch(title="Methods"), content_length=20)

    def test_malformed_offset(self):
        """Offsets outside the buffer are never accepted."""
        from utils.matching import BoundaryMatch, is_accepted

        assert not is_accepted(
            BoundaryMatch(title="Methods", distance=0, offset=18, end=25),
            content_length=20
        )
        assert not is_accepted(
            BoundaryMatch(title="Methods", distance=0, offset=-3, end=4),
            content_length=20
        )

    def test_typo_in_long_title(self):
        """A single typo in a 12 character title is tolerated."""
        from utils.matching import locate_boundary, is_accepted

        content = "text before Intrxduction text after"
        match = locate_boundary(content, "Introduction")

        assert match.distance == 1
        assert is_accepted(match, len(content))

    def test_typo_in_five_character_title(self):
        """round(0.5) is 1, so a five character title tolerates one typo."""
        from utils.matching import locate_boundary, is_accepted

        content = "text before Intxo text after"
        match = locate_boundary(content, "Intro")

        assert match.distance == 1
        assert is_accepted(match, len(content))

    def test_typo_in_four_character_title(self):
        from utils.matching import locate_boundary, is_accepted

        content = "text before Abxd text after"
        match = locate_boundary(content, "Abcd")

        assert match.distance == 1
        assert not is_accepted(match, len(content))
