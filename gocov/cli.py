# Copyright 2025 Irreducible Inc.
"""Command line front end."""

import argparse
import sys

from pygments.styles import get_all_styles

from gocov.display import CoverageDisplay
from gocov.errors import FileReadError, GocovError, ProfileParseError
from gocov.packages import GoListQuery
from gocov.profile import parse_profiles, parse_profiles_from_file
from gocov.render import PALETTES, RENDERERS, get_renderer

EPILOG = """\
Given a coverage profile produced by 'go test':
    go test -coverprofile=c.out

Provide the coverage profile as an argument:
    gocov c.out

Or on standard input:
    cat c.out | gocov
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gocov",
        description="Display Go test coverage",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('profile', nargs='?', default='-',
                       help='Coverage profile (default: standard input)')

    # Rendering
    parser.add_argument('--renderer', choices=sorted(RENDERERS), default='overlay',
                       help='overlay: coverage over syntax highlighting (default); '
                            'stream: coverage colors only')
    parser.add_argument('--no-highlight', action='store_true',
                       help='Disable syntax highlighting')
    parser.add_argument('--style', choices=sorted(get_all_styles()), default='monokai',
                       metavar='STYLE', help='Pygments style for syntax highlighting (default: monokai)')
    parser.add_argument('--colors', choices=sorted(PALETTES), default='truecolor',
                       help='Terminal color mode (default: truecolor)')

    # Package lookup
    parser.add_argument('--go', metavar='PATH',
                       help='go binary used to locate packages (default: $GOROOT/bin/go, then PATH)')

    # Error handling and reporting
    parser.add_argument('--fail-fast', action='store_true',
                       help='Stop at the first file that cannot be shown')
    parser.add_argument('--summary', action='store_true',
                       help='Print a coverage summary table after the listings')
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.profile == '-':
            profiles = parse_profiles(sys.stdin)
        else:
            profiles = parse_profiles_from_file(args.profile)
    except FileReadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except ProfileParseError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    palette = PALETTES[args.colors]
    display = CoverageDisplay(
        renderer=get_renderer(args.renderer, palette),
        palette=palette,
        query_packages=GoListQuery(args.go),
        highlight=not args.no_highlight,
        style=args.style,
        palette_name=args.colors,
        fail_fast=args.fail_fast,
    )

    try:
        failures = display.display(profiles)
    except GocovError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.summary:
        print(display.summary(profiles))

    if failures:
        print(f"\n{failures} file{'s' if failures > 1 else ''} could not be displayed", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
