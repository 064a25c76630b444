"""Tests for coverage profile parsing."""

import io

import pytest

from gocov.errors import FileReadError, ProfileParseError
from gocov.profile import ProfileBlock, parse_profiles, parse_profiles_from_file

SAMPLE = """\
mode: set
example.com/m/pkg/b.go:3.20,5.2 1 1
example.com/m/pkg/a.go:10.5,12.3 2 0
example.com/m/pkg/a.go:4.14,8.2 3 1
"""


def parse(text):
    return parse_profiles(io.StringIO(text))


def test_parse_groups_and_sorts():
    """Profiles come back sorted by file name, blocks by position."""
    profiles = parse(SAMPLE)

    assert [p.file_name for p in profiles] == ["example.com/m/pkg/a.go", "example.com/m/pkg/b.go"]
    a = profiles[0]
    assert a.mode == "set"
    assert a.blocks == [
        ProfileBlock(4, 14, 8, 2, 3, 1),
        ProfileBlock(10, 5, 12, 3, 2, 0),
    ]


def test_statement_counts():
    a = parse(SAMPLE)[0]
    assert a.num_statements() == 5
    assert a.covered_statements() == 3
    assert a.coverage_percent() == pytest.approx(60.0)


def test_merge_duplicate_blocks_set_mode():
    profiles = parse("mode: set\nf.go:1.1,2.1 1 0\nf.go:1.1,2.1 1 1\nf.go:1.1,2.1 1 1\n")
    assert [b.count for b in profiles[0].blocks] == [1]


def test_merge_duplicate_blocks_count_mode():
    text = "mode: count\nf.go:1.1,2.1 1 3\nmode: count\nf.go:1.1,2.1 1 4\n"
    assert [b.count for b in parse(text)[0].blocks] == [7]


def test_inconsistent_num_stmt():
    with pytest.raises(ProfileParseError, match="inconsistent NumStmt"):
        parse("mode: atomic\nf.go:1.1,2.1 1 3\nf.go:1.1,2.1 2 4\n")


def test_missing_mode_line():
    with pytest.raises(ProfileParseError, match="mode"):
        parse("f.go:1.1,2.1 1 3\n")


def test_unknown_mode():
    with pytest.raises(ProfileParseError):
        parse("mode: sometimes\n")


def test_conflicting_modes():
    with pytest.raises(ProfileParseError, match="conflicts"):
        parse("mode: set\nf.go:1.1,2.1 1 1\nmode: count\n")


def test_malformed_block_line():
    with pytest.raises(ProfileParseError, match="line 3"):
        parse("mode: set\nf.go:1.1,2.1 1 1\nf.go:1.1-2.1 1 1\n")


def test_blank_lines_and_crlf():
    profiles = parse("mode: set\r\n\r\nf.go:1.1,2.1 1 1\r\n\n")
    assert len(profiles) == 1
    assert profiles[0].blocks[0].covered


def test_empty_profile():
    assert parse("") == []
    assert parse("mode: set\n") == []


def test_windows_style_file_names():
    profiles = parse("mode: set\nC:/src/f.go:1.1,2.1 1 1\n")
    assert profiles[0].file_name == "C:/src/f.go"


def test_parse_from_file(tmp_path):
    path = tmp_path / "c.out"
    path.write_text(SAMPLE)
    assert len(parse_profiles_from_file(str(path))) == 2


def test_parse_from_missing_file(tmp_path):
    with pytest.raises(FileReadError, match="failed to open"):
        parse_profiles_from_file(str(tmp_path / "missing.out"))
