# Copyright 2025 Irreducible Inc.
"""Errors raised while loading, resolving and rendering coverage profiles."""


class GocovError(Exception):
    """Base class for every failure reported by gocov."""
    pass


class ProfileParseError(GocovError):
    """Raised when the coverage profile stream is malformed."""
    pass


class PackageNotFoundError(GocovError):
    """Raised when a file's package is missing from the go list output."""
    pass


class PackageResolutionError(GocovError):
    """Raised when go list reported an error for a file's package."""
    pass


class MetadataQueryError(GocovError):
    """Raised when go list could not be run or its output could not be decoded."""
    pass


class FileReadError(GocovError):
    """Raised when a source file or profile cannot be read."""
    pass


class RenderConsistencyError(GocovError):
    """Raised when raw and highlighted text disagree with the coverage blocks."""
    pass
