# Copyright 2025 Irreducible Inc.
"""
Go Coverage Display

Prints the source files named in a Go coverage profile with covered and
uncovered spans highlighted in the terminal.
"""

from gocov.errors import (
    GocovError,
    ProfileParseError,
    PackageNotFoundError,
    PackageResolutionError,
    MetadataQueryError,
    FileReadError,
    RenderConsistencyError,
)
from gocov.profile import Profile, ProfileBlock, parse_profiles, parse_profiles_from_file
from gocov.packages import Package, GoListQuery, build_path_map, resolve
from gocov.render import (
    Palette,
    TRUECOLOR,
    ANSI16,
    StreamingRenderer,
    OverlayRenderer,
    cut_lines,
    overlay_lines,
    get_renderer,
)
from gocov.display import CoverageDisplay

__version__ = "0.1.0"
