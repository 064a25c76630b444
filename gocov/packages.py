# Copyright 2025 Irreducible Inc.
"""
Package location lookup.

Profiles name files by import path (example.com/mod/pkg/file.go). The package
directories are looked up on disk with a single batched 'go list -e -json'.
"""

import json
import os
import posixpath
import shutil
import subprocess
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from gocov.errors import MetadataQueryError, PackageNotFoundError, PackageResolutionError
from gocov.profile import Profile


@dataclass(frozen=True)
class Package:
    """A single package, as described by the JSON output of 'go list'."""
    import_path: str
    dir: str = ""
    error: Optional[str] = None

    @classmethod
    def from_json(cls, obj: Dict) -> "Package":
        err = obj.get("Error") or None
        return cls(
            import_path=obj.get("ImportPath", ""),
            dir=obj.get("Dir", ""),
            error=err.get("Err", "") if err is not None else None,
        )


QueryPackages = Callable[[List[str]], Iterable[Package]]


def is_local_path(file_name: str) -> bool:
    """Relative ('./x.go') and absolute paths are used as they are."""
    return file_name.startswith(".") or os.path.isabs(file_name)


def package_dir(file_name: str) -> str:
    return posixpath.dirname(file_name) or "."


def decode_packages(text: str) -> Iterator[Package]:
    """Decode a stream of concatenated JSON objects into packages."""
    decoder = json.JSONDecoder()
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos >= end:
            return
        try:
            obj, pos = decoder.raw_decode(text, pos)
        except json.JSONDecodeError as e:
            raise MetadataQueryError(f"decoding go list json: {e}") from e
        if not isinstance(obj, dict):
            raise MetadataQueryError(f"decoding go list json: expected an object, got {type(obj).__name__}")
        yield Package.from_json(obj)


class GoListQuery:
    """Runs 'go list -e -json' for a batch of import paths."""

    def __init__(self, go: Optional[str] = None):
        self.go = go or self._find_go()

    @staticmethod
    def _find_go() -> str:
        """Locate the go binary: $GOROOT/bin/go first, then PATH."""
        goroot = os.environ.get("GOROOT")
        if goroot:
            return os.path.join(goroot, "bin", "go")
        return shutil.which("go") or "go"

    def __call__(self, import_paths: List[str]) -> List[Package]:
        cmd = [self.go, "list", "-e", "-json"] + list(import_paths)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            raise MetadataQueryError(f"cannot run go list: {e}\n{e.stderr or ''}") from e
        except OSError as e:
            raise MetadataQueryError(f"cannot run go list: {e}\n") from e
        return list(decode_packages(result.stdout))


def build_path_map(profiles: Iterable[Profile],
                   query_packages: Optional[QueryPackages] = None) -> Dict[str, Optional[Package]]:
    """Find the location of every package referenced by the profiles.

    Relative and absolute file names need no lookup. When every file is one of
    those, the map is empty and go list is never run.
    """
    pkgs: Dict[str, Optional[Package]] = {}
    wanted: List[str] = []
    for profile in profiles:
        if is_local_path(profile.file_name):
            continue
        pkg = package_dir(profile.file_name)
        if pkg not in pkgs:
            pkgs[pkg] = None
            wanted.append(pkg)

    if not wanted:
        return pkgs

    if query_packages is None:
        query_packages = GoListQuery()
    found = list(query_packages(wanted))
    for pkg in found:
        pkgs[pkg.import_path] = pkg
    return pkgs


def resolve(path_map: Dict[str, Optional[Package]], file_name: str) -> str:
    """Map a profile file name to the file on disk."""
    if is_local_path(file_name):
        return file_name
    pkg = path_map.get(package_dir(file_name))
    if pkg is not None:
        if pkg.dir:
            return os.path.join(pkg.dir, posixpath.basename(file_name))
        if pkg.error is not None:
            raise PackageResolutionError(pkg.error)
    raise PackageNotFoundError(f"did not find package for {file_name} in go list output")
