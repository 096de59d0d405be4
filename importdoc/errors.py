"""Exceptions raised by the document importer."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ImportDocumentError(Exception):
    """Base class for failures that abort an import run."""


class ConfigError(ImportDocumentError):
    """Settings are missing or malformed."""


class FileResolutionError(ImportDocumentError):
    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class AuthenticationError(ImportDocumentError):
    """The identity provider did not return an access token."""
