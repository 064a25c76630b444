# Copyright 2025 Irreducible Inc.
"""
Coverage profile parsing.

Reads the text format written by 'go test -coverprofile':

    mode: set
    example.com/mod/pkg/file.go:12.34,15.2 3 1

Each block line is "file:startLine.startCol,endLine.endCol numStmt count".
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from gocov.errors import FileReadError, ProfileParseError

MODES = ("set", "count", "atomic")

_MODE_PREFIX = "mode:"
_BLOCK_RE = re.compile(r"^(.+):([0-9]+)\.([0-9]+),([0-9]+)\.([0-9]+) ([0-9]+) ([0-9]+)$")


@dataclass
class ProfileBlock:
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_stmt: int
    count: int

    @property
    def covered(self) -> bool:
        return self.count > 0


@dataclass
class Profile:
    file_name: str
    mode: str
    blocks: List[ProfileBlock] = field(default_factory=list)

    def num_statements(self) -> int:
        return sum(b.num_stmt for b in self.blocks)

    def covered_statements(self) -> int:
        return sum(b.num_stmt for b in self.blocks if b.count > 0)

    def coverage_percent(self) -> float:
        total = self.num_statements()
        if total == 0:
            return 0.0
        return self.covered_statements() / total * 100


def _parse_block_line(line: str, line_no: int) -> Tuple[str, ProfileBlock]:
    """Parse one block line into its file name and block."""
    m = _BLOCK_RE.match(line)
    if not m:
        raise ProfileParseError(f"line {line_no}: line {line!r} doesn't match expected format")
    fn = m.group(1)
    start_line, start_col, end_line, end_col, num_stmt, count = (int(g) for g in m.groups()[1:])
    return fn, ProfileBlock(start_line, start_col, end_line, end_col, num_stmt, count)


def _merge_blocks(mode: str, blocks: List[ProfileBlock], file_name: str) -> List[ProfileBlock]:
    """Sort blocks by position and fold duplicates reported by several test binaries."""
    blocks = sorted(blocks, key=lambda b: (b.start_line, b.start_col))
    merged: List[ProfileBlock] = []
    for b in blocks:
        last = merged[-1] if merged else None
        if (last is not None
                and (last.start_line, last.start_col, last.end_line, last.end_col)
                == (b.start_line, b.start_col, b.end_line, b.end_col)):
            if last.num_stmt != b.num_stmt:
                raise ProfileParseError(
                    f"inconsistent NumStmt in {file_name}: changed from {last.num_stmt} to {b.num_stmt}")
            if mode == "set":
                last.count = 1 if (last.count or b.count) else 0
            else:
                last.count += b.count
            continue
        merged.append(b)
    return merged


def parse_profiles(stream: Iterable[str]) -> List[Profile]:
    """Parse a coverage profile stream into per-file profiles sorted by file name."""
    mode: Optional[str] = None
    files: Dict[str, List[ProfileBlock]] = {}

    for line_no, raw in enumerate(stream, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue

        if line.startswith(_MODE_PREFIX):
            line_mode = line[len(_MODE_PREFIX):].strip()
            if line_mode not in MODES:
                raise ProfileParseError(f"line {line_no}: unknown mode {line_mode!r}")
            if mode is not None and line_mode != mode:
                raise ProfileParseError(f"line {line_no}: mode {line_mode!r} conflicts with {mode!r}")
            mode = line_mode
            continue

        if mode is None:
            raise ProfileParseError("bad mode line: profile must start with 'mode:'")

        fn, block = _parse_block_line(line, line_no)
        files.setdefault(fn, []).append(block)

    return [Profile(fn, mode, _merge_blocks(mode, blocks, fn))
            for fn, blocks in sorted(files.items())]


def parse_profiles_from_file(path: str) -> List[Profile]:
    """Open and parse a coverage profile file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_profiles(f)
    except OSError as e:
        raise FileReadError(f"failed to open {path!r}: {e}") from e
