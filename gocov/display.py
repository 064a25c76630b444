# Copyright 2025 Irreducible Inc.
"""
Per-file coverage display.

Resolves every profile entry to a file on disk, prints a header and the
colorized source, and optionally a coverage summary table.
"""

import sys
from typing import Dict, List, Optional, Sequence, TextIO

from tabulate import tabulate

from gocov.errors import FileReadError, GocovError
from gocov.packages import Package, QueryPackages, build_path_map, resolve
from gocov.profile import Profile
from gocov.render import TRUECOLOR, OverlayRenderer, Palette, Renderer, highlight_source


def read_source(path: str, file_name: str) -> str:
    """Read a source file without translating its line endings."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
            return f.read()
    except OSError as e:
        raise FileReadError(f"can't read {file_name!r}: {e}") from e


class CoverageDisplay:
    def __init__(self, renderer: Optional[Renderer] = None, palette: Palette = TRUECOLOR,
                 out: Optional[TextIO] = None, err: Optional[TextIO] = None,
                 query_packages: Optional[QueryPackages] = None,
                 highlight: bool = True, style: str = "monokai",
                 palette_name: str = "truecolor", fail_fast: bool = False):
        self.palette = palette
        self.renderer = renderer or OverlayRenderer(palette)
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.query_packages = query_packages
        self.highlight = highlight
        self.style = style
        self.palette_name = palette_name
        self.fail_fast = fail_fast
        # ANSI color codes for the summary table
        self.colors = {
            'green': '\033[92m',
            'yellow': '\033[38;5;220m',
            'red': '\033[91m',
            'reset': palette.reset,
            'bold': '\033[1m'
        }

    def _header(self, file_name: str) -> str:
        border = "-" * len(file_name)
        p = self.palette
        return f"\n{border}\n{p.header}{file_name}{p.reset}\n{border}\n\n"

    def _highlighted(self, src: str, file_name: str) -> Optional[str]:
        if not (self.highlight and self.renderer.uses_highlighting):
            return None
        return highlight_source(src, file_name, self.style, self.palette_name)

    def display_file(self, path_map: Dict[str, Optional[Package]], profile: Profile):
        """Print one profile entry. Raises GocovError on failure."""
        fn = profile.file_name
        path = resolve(path_map, fn)
        src = read_source(path, fn)
        self.out.write(self._header(fn))
        self.renderer.write(self.out, src, profile.blocks, self._highlighted(src, fn))
        self.out.flush()

    def display(self, profiles: Sequence[Profile]) -> int:
        """Print every profile entry in order.

        Returns the number of files that could not be shown. Without fail_fast
        a failing file is reported and skipped; MetadataQueryError from the
        package lookup always aborts the run.
        """
        path_map = build_path_map(profiles, self.query_packages)
        failures = 0
        for profile in profiles:
            try:
                self.display_file(path_map, profile)
            except GocovError as e:
                if self.fail_fast:
                    raise
                failures += 1
                print(f"ERROR: {e}", file=self.err)
        return failures

    def _colorize_percentage(self, value: float) -> str:
        """Add color to percentage based on value."""
        percentage = f"{value:.1f}%"
        if value >= 95:
            return f"{self.colors['bold']}{self.colors['green']}{percentage}{self.colors['reset']}"
        elif value >= 80:
            return f"{self.colors['green']}{percentage}{self.colors['reset']}"
        elif value >= 50:
            return f"{self.colors['yellow']}{percentage}{self.colors['reset']}"
        else:
            return f"{self.colors['red']}{percentage}{self.colors['reset']}"

    def summary(self, profiles: Sequence[Profile]) -> str:
        """Format statement coverage per file as a table."""
        headers = ['File', 'Statements', 'Coverage']
        rows: List[List[str]] = []
        total = covered = 0

        for profile in profiles:
            stmts = profile.num_statements()
            hit = profile.covered_statements()
            total += stmts
            covered += hit
            filename = profile.file_name
            if len(filename) > 60:
                filename = "..." + filename[-57:]
            rows.append([
                filename,
                f"{hit:>4}/{stmts:<4}",
                self._colorize_percentage(profile.coverage_percent()),
            ])

        total_pct = (covered / total * 100) if total > 0 else 0.0
        rows.append([
            f"{self.colors['bold']}TOTAL{self.colors['reset']}",
            f"{covered:>4}/{total:<4}",
            self._colorize_percentage(total_pct),
        ])

        table = tabulate(rows, headers=headers, tablefmt='simple', colalign=('left', 'center', 'center'))
        return "\nCoverage Summary\n" + table
