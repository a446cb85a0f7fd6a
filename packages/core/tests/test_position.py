"""Tests for line validation and diff position calculation."""

import pytest

from prcommenter_core.errors import InvalidTargetError
from prcommenter_core.patch import ChangeRange, parse_change_range
from prcommenter_core.position import find_change_range, is_commentable, resolve_position

SHA = "b" * 40
RANGES = {
    "a.go": ChangeRange("a.go", 10, 14, SHA),
    "b.go": ChangeRange("b.go", 1, 1, SHA),
}


class TestIsCommentable:
    @pytest.mark.parametrize("line", [10, 11, 12, 13, 14])
    def test_every_line_in_range_is_valid(self, line):
        assert is_commentable(RANGES, "a.go", line)

    @pytest.mark.parametrize("line", [0, 9, 15, 20])
    def test_lines_outside_range_are_invalid(self, line):
        assert not is_commentable(RANGES, "a.go", line)

    def test_unknown_file_is_invalid(self):
        assert not is_commentable(RANGES, "c.go", 12)

    def test_range_of_another_file_does_not_apply(self):
        assert not is_commentable(RANGES, "b.go", 12)


class TestFindChangeRange:
    def test_returns_range_for_valid_line(self):
        assert find_change_range(RANGES, "a.go", 12) is RANGES["a.go"]

    def test_out_of_range_raises_invalid_target(self):
        with pytest.raises(InvalidTargetError) as exc:
            find_change_range(RANGES, "a.go", 20)
        assert exc.value.file_name == "a.go"
        assert exc.value.line == 20

    def test_unknown_file_raises_invalid_target(self):
        with pytest.raises(InvalidTargetError):
            find_change_range(RANGES, "missing.go", 1)


class TestResolvePosition:
    def test_first_line_of_hunk_is_position_one(self):
        """The @@ header is position 0, so the hunk's first line is 1."""
        assert resolve_position(RANGES["a.go"], 10) == 1

    def test_position_counts_from_hunk_start(self):
        assert resolve_position(RANGES["a.go"], 12) == 3
        assert resolve_position(RANGES["a.go"], 14) == 5

    def test_degenerate_range(self):
        assert resolve_position(RANGES["b.go"], 1) == 1

    def test_line_outside_range_raises(self):
        with pytest.raises(InvalidTargetError):
            resolve_position(RANGES["a.go"], 15)

    def test_position_from_parsed_patch(self):
        r = parse_change_range("a.go", "@@ -1,3 +10,5 @@\n line", f"https://x/contents/a.go?ref={SHA}")
        assert resolve_position(r, 12) == 3
