# Copyright 2025 Irreducible Inc.
"""
Coverage rendering.

Two ways of painting coverage blocks onto source text:

  stream   cuts the raw source at block boundaries and wraps covered and
           uncovered spans in a background color. No line index is built.
  overlay  splits raw and syntax-highlighted text into aligned lines and
           replaces the lines inside blocks with coverage-colored raw text.
           Lines outside blocks keep their syntax highlighting.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, TextIO, Tuple, Type

from pygments import highlight
from pygments.formatters import TerminalFormatter, TerminalTrueColorFormatter
from pygments.lexers import GoLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

from gocov.errors import RenderConsistencyError
from gocov.profile import ProfileBlock


@dataclass(frozen=True)
class Palette:
    """Escape sequences used for each role in the output."""
    header: str
    covered: str
    uncovered: str
    foreground: str
    reset: str

    def background_for(self, count: int) -> str:
        return self.covered if count > 0 else self.uncovered


TRUECOLOR = Palette(
    header="\x1b[1m",
    covered="\x1b[48;2;10;64;4m",
    uncovered="\x1b[48;2;64;4;8m",
    foreground="\x1b[97m",
    reset="\x1b[0m",
)

ANSI16 = Palette(
    header="\x1b[1m",
    covered="\x1b[42m",
    uncovered="\x1b[41m",
    foreground="\x1b[97m",
    reset="\x1b[0m",
)

PALETTES: Dict[str, Palette] = {
    "truecolor": TRUECOLOR,
    "16": ANSI16,
}


def cut_lines(buf: str, n: int, sep: str = "\n") -> Tuple[str, str]:
    """Split buf after the n-th separator.

    Returns (before, after) where before holds the first n separator-terminated
    chunks. For n <= 0 nothing is taken. When fewer than n separators remain,
    before is the whole buffer.
    """
    if n <= 0:
        return "", buf
    pos = 0
    for _ in range(n):
        idx = buf.find(sep, pos)
        if idx < 0:
            return buf, ""
        pos = idx + len(sep)
    return buf[:pos], buf[pos:]


def overlay_lines(lines: Sequence[str], hl_lines: Sequence[str],
                  blocks: Sequence[ProfileBlock], palette: Palette) -> List[str]:
    """Merge coverage blocks into highlighted lines.

    Zero-based indices start_line .. end_line - 2 of each block are replaced
    by the raw line in coverage colors; the last line of a block keeps its
    highlighted form.
    """
    if len(lines) != len(hl_lines):
        raise RenderConsistencyError(
            f"highlighted text has {len(hl_lines)} lines, source has {len(lines)}")
    out = [""] * len(lines)
    for b in blocks:
        color = palette.background_for(b.count)
        for i in range(b.start_line, b.end_line - 1):
            if not 0 <= i < len(lines):
                raise RenderConsistencyError(
                    f"block {b.start_line}-{b.end_line} is outside the source ({len(lines)} lines)")
            out[i] = f"{color}{palette.foreground}{lines[i]}{palette.reset}"
    return [o if o else hl for o, hl in zip(out, hl_lines)]


def highlight_source(src: str, file_name: str, style: str = "monokai", palette_name: str = "truecolor") -> str:
    """Syntax-highlight src for the terminal, keeping its line count."""
    try:
        lexer = get_lexer_for_filename(file_name, stripnl=False, ensurenl=False)
    except ClassNotFound:
        lexer = GoLexer(stripnl=False, ensurenl=False)
    if palette_name == "16":
        formatter = TerminalFormatter()
    else:
        formatter = TerminalTrueColorFormatter(style=style)
    return highlight(src, lexer, formatter)


class Renderer:
    uses_highlighting = False

    def __init__(self, palette: Palette = TRUECOLOR):
        self.palette = palette

    def render(self, src: str, blocks: Sequence[ProfileBlock], highlighted: Optional[str] = None):
        raise NotImplementedError

    def write(self, out: TextIO, src: str, blocks: Sequence[ProfileBlock],
              highlighted: Optional[str] = None):
        raise NotImplementedError


class StreamingRenderer(Renderer):
    """Paints block spans directly from the remaining source text."""

    def render(self, src: str, blocks: Sequence[ProfileBlock],
               highlighted: Optional[str] = None) -> Iterator[str]:
        p = self.palette
        rest = src
        consumed = 0
        for b in blocks:
            start = max(b.start_line, consumed + 1)
            plain, rest = cut_lines(rest, start - 1 - consumed)
            if plain:
                yield plain
            painted, rest = cut_lines(rest, b.end_line - start)
            if painted:
                yield f"{p.background_for(b.count)}{painted}{p.reset}"
            consumed = max(consumed, b.end_line - 1)
        if rest:
            yield f"{p.reset}{rest}"

    def write(self, out: TextIO, src: str, blocks: Sequence[ProfileBlock],
              highlighted: Optional[str] = None):
        for fragment in self.render(src, blocks):
            out.write(fragment)


class OverlayRenderer(Renderer):
    """Overlays coverage colors on a syntax-highlighted rendering."""
    uses_highlighting = True

    def render(self, src: str, blocks: Sequence[ProfileBlock],
               highlighted: Optional[str] = None) -> List[str]:
        if highlighted is None:
            highlighted = src
        return overlay_lines(src.split("\n"), highlighted.split("\n"), blocks, self.palette)

    def write(self, out: TextIO, src: str, blocks: Sequence[ProfileBlock],
              highlighted: Optional[str] = None):
        for line in self.render(src, blocks, highlighted):
            out.write(line + "\n")


RENDERERS: Dict[str, Type[Renderer]] = {
    "overlay": OverlayRenderer,
    "stream": StreamingRenderer,
}


def get_renderer(name: str, palette: Palette = TRUECOLOR) -> Renderer:
    try:
        return RENDERERS[name](palette)
    except KeyError:
        raise ValueError(f"unknown renderer {name!r}, expected one of {', '.join(RENDERERS)}") from None
