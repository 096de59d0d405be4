"""Import local documents into the chat backend's document memory store."""

from .errors import AuthenticationError, ConfigError, FileResolutionError, ImportDocumentError
from .journal import ImportJournal, iter_import_events, tail_import_events
from .resolver import describe_import, is_wildcard, resolve_files
from .uploader import (
    DocumentUploader,
    ImportReport,
    UploadOutcome,
    UploadResult,
    build_upload_url,
)

__all__ = [
    "ImportDocumentError",
    "ConfigError",
    "FileResolutionError",
    "AuthenticationError",
    "ImportJournal",
    "iter_import_events",
    "tail_import_events",
    "is_wildcard",
    "resolve_files",
    "describe_import",
    "DocumentUploader",
    "ImportReport",
    "UploadOutcome",
    "UploadResult",
    "build_upload_url",
]
