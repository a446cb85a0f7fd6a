"""Tests for patch parsing — the commentable range decides which lines can be targeted."""

import types

import pytest

from prcommenter_core.errors import PatchSetupError, PatchUnresolvedError, RefUnresolvedError
from prcommenter_core.patch import ChangeRange, load_change_ranges, parse_change_range

SHA = "a" * 40
CONTENTS_URL = f"https://api.github.com/repos/owner/repo/contents/a.go?ref={SHA}"


def make_file(filename="a.go", status="modified", patch="@@ -1,3 +10,5 @@\n+x", contents_url=CONTENTS_URL, changes=1):
    return types.SimpleNamespace(
        filename=filename,
        status=status,
        patch=patch,
        contents_url=contents_url,
        changes=changes,
    )


class TestParseChangeRange:
    def test_range_from_hunk_header(self):
        r = parse_change_range("a.go", "@@ -1,3 +10,5 @@\n line", CONTENTS_URL)
        assert (r.range_start, r.range_end) == (10, 14)

    @pytest.mark.parametrize("start,count", [(1, 1), (1, 4), (42, 7), (300, 120)])
    def test_range_is_start_to_start_plus_count_minus_one(self, start, count):
        r = parse_change_range("a.go", f"@@ -5,2 +{start},{count} @@ def foo():\n+x", CONTENTS_URL)
        assert r.range_start == start
        assert r.range_end == start + count - 1

    def test_commit_ref_taken_from_contents_url(self):
        r = parse_change_range("a.go", "@@ -1,3 +10,5 @@", CONTENTS_URL)
        assert r.commit_ref == SHA

    def test_no_hunk_header_with_changes_degenerates_to_first_line(self):
        r = parse_change_range("a.go", "", CONTENTS_URL, changes=2)
        assert (r.range_start, r.range_end) == (1, 1)

    def test_none_patch_with_changes_degenerates_to_first_line(self):
        """Renames without content changes come back from GitHub with no patch at all."""
        r = parse_change_range("a.go", None, CONTENTS_URL, changes=1)
        assert (r.range_start, r.range_end) == (1, 1)

    def test_no_hunk_header_and_no_changes_raises(self):
        with pytest.raises(PatchUnresolvedError) as exc:
            parse_change_range("a.go", "", CONTENTS_URL, changes=0)
        assert exc.value.file_name == "a.go"

    def test_missing_ref_raises(self):
        with pytest.raises(RefUnresolvedError):
            parse_change_range("a.go", "@@ -1,3 +10,5 @@", "https://api.github.com/repos/owner/repo/contents/a.go")

    def test_missing_contents_url_raises(self):
        with pytest.raises(RefUnresolvedError):
            parse_change_range("a.go", "@@ -1,3 +10,5 @@", None)

    def test_only_first_hunk_used(self):
        patch = "@@ -1,2 +1,3 @@\n a\n+b\n c\n@@ -20,2 +21,4 @@\n d\n+e"
        r = parse_change_range("a.go", patch, CONTENTS_URL)
        assert (r.range_start, r.range_end) == (1, 3)
        assert r.hunk_count == 2
        assert r.multi_hunk is True

    def test_multi_hunk_file_logs_warning(self, caplog):
        patch = "@@ -1,2 +1,3 @@\n a\n@@ -20,2 +21,4 @@\n d"
        with caplog.at_level("WARNING"):
            parse_change_range("a.go", patch, CONTENTS_URL)
        assert "a.go has 2 hunks" in caplog.text

    def test_removal_only_first_hunk_raises_patch_error(self):
        """A first hunk that adds nothing ("+4,0") has no commentable line."""
        with pytest.raises(PatchUnresolvedError) as exc:
            parse_change_range("a.py", "@@ -5,2 +4,0 @@\n-a\n-b", CONTENTS_URL, changes=2)
        assert "only removes lines" in str(exc.value)

    def test_countless_header_is_a_one_line_hunk(self):
        r = parse_change_range("a.py", "@@ -3 +3 @@\n-a\n+b", CONTENTS_URL, changes=2)
        assert (r.range_start, r.range_end) == (3, 3)

    def test_countless_first_header_does_not_fall_through_to_later_hunk(self):
        """Positions count from the patch's first @@, so a later hunk must never be taken as the first."""
        patch = "@@ -3 +3 @@\n-a\n+b\n@@ -20,2 +20,3 @@\n c\n+d\n e"
        r = parse_change_range("a.py", patch, CONTENTS_URL, changes=3)
        assert (r.range_start, r.range_end) == (3, 3)
        assert r.hunk_count == 2
        assert r.multi_hunk is True

    def test_header_not_at_start_of_patch_is_ignored(self):
        r = parse_change_range("a.py", "junk\n@@ -1,2 +10,4 @@\n+x", CONTENTS_URL, changes=1)
        assert (r.range_start, r.range_end) == (1, 1)

    def test_single_hunk_is_not_flagged(self):
        r = parse_change_range("a.go", "@@ -1,3 +10,5 @@", CONTENTS_URL)
        assert r.hunk_count == 1
        assert r.multi_hunk is False


class TestChangeRange:
    def test_is_immutable(self):
        r = ChangeRange("a.go", 1, 3, SHA)
        with pytest.raises(AttributeError):
            r.range_start = 2

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError):
            ChangeRange("a.go", 5, 4, SHA)

    def test_contains_is_inclusive(self):
        r = ChangeRange("a.go", 10, 14, SHA)
        assert 10 in r
        assert 14 in r
        assert 9 not in r
        assert 15 not in r


class TestLoadChangeRanges:
    def test_keyed_by_file_name(self):
        ranges = load_change_ranges([make_file("a.go"), make_file("b.go", patch="@@ -1,1 +1,2 @@")])
        assert set(ranges) == {"a.go", "b.go"}
        assert ranges["b.go"].range_end == 2

    @pytest.mark.parametrize("status", ["removed", "deleted"])
    def test_deleted_files_excluded(self, status):
        ranges = load_change_ranges([make_file("a.go"), make_file("gone.go", status=status, patch="", changes=0)])
        assert "gone.go" not in ranges

    def test_all_failures_reported_together(self):
        files = [
            make_file("good.go"),
            make_file("nopatch.go", patch="", changes=0),
            make_file("noref.go", contents_url="https://example.com/x"),
        ]
        with pytest.raises(PatchSetupError) as exc:
            load_change_ranges(files)
        message = str(exc.value)
        assert "nopatch.go" in message
        assert "noref.go" in message
        assert "good.go" not in message
        assert [e.file_name for e in exc.value.errors] == ["nopatch.go", "noref.go"]

    def test_removal_only_hunk_aggregated_with_other_failures(self):
        files = [
            make_file("a.py", patch="@@ -5,2 +4,0 @@\n-a\n-b", changes=2),
            make_file("b.py", contents_url="https://example.com/no-ref"),
        ]
        with pytest.raises(PatchSetupError) as exc:
            load_change_ranges(files)
        assert [e.file_name for e in exc.value.errors] == ["a.py", "b.py"]

    def test_empty_file_set(self):
        assert load_change_ranges([]) == {}
