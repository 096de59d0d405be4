"""Expansion of --files arguments into concrete files."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable, List

from .errors import FileResolutionError


WILDCARD_CHARS = ("*", "?", "[")


def is_wildcard(path: str) -> bool:
    """Only the file name part may carry a pattern."""

    name = os.path.basename(path)
    return any(char in name for char in WILDCARD_CHARS)


def _expand_wildcard(pattern: str) -> List[Path]:
    full = Path(pattern).expanduser().absolute()
    directory = full.parent
    if not directory.is_dir():
        raise FileResolutionError(f"Directory {directory} does not exist.", directory)

    matches: List[Path] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_file() and fnmatch.fnmatch(entry.name, full.name):
                matches.append(directory / entry.name)
    return matches


def _check_literal(path: str) -> Path:
    full = Path(path).expanduser().absolute()
    if not full.is_file():
        raise FileResolutionError(f"File {full} does not exist.", full)
    if not os.access(full, os.R_OK):
        raise FileResolutionError(f"File {full} is not readable.", full)
    return full


def resolve_files(paths: Iterable[str]) -> List[Path]:
    """Resolve literal paths and wildcard patterns, keeping argument order.

    A literal path that does not exist aborts the whole resolution. A pattern
    that matches nothing contributes no files and is not an error.
    """

    resolved: List[Path] = []
    for path in paths:
        if is_wildcard(path):
            resolved.extend(_expand_wildcard(path))
        else:
            resolved.append(_check_literal(path))
    return resolved


def describe_import(files: List[Path]) -> str:
    if len(files) == 1:
        return f"Importing file {files[0]}..."
    return f"Importing {len(files)} files..."
