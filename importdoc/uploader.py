"""Sequential multipart upload of documents to the ingestion endpoint."""

from __future__ import annotations

import logging
import mimetypes
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

import httpx

from .journal import ImportJournal


logger = logging.getLogger(__name__)

# Field name the backend's document controller binds uploaded files to.
FORM_FIELD = "formFiles"
NIL_CHAT_ID = uuid.UUID(int=0)


class UploadOutcome(str, Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    TRANSPORT_ERROR = "transport_error"
    FILE_ERROR = "file_error"


@dataclass
class UploadResult:
    path: Path
    outcome: UploadOutcome
    status_code: Optional[int] = None
    reason: Optional[str] = None
    body: Optional[str] = None
    error: Optional[str] = None

    def as_details(self) -> dict:
        return {
            "file": str(self.path),
            "outcome": self.outcome.value,
            "status_code": self.status_code,
            "reason": self.reason,
            "error": self.error,
        }


@dataclass
class ImportReport:
    results: List[UploadResult] = field(default_factory=list)
    aborted: bool = False

    @property
    def attempted(self) -> int:
        return len(self.results)

    def _count(self, outcome: UploadOutcome) -> int:
        return sum(1 for result in self.results if result.outcome is outcome)

    @property
    def succeeded(self) -> int:
        return self._count(UploadOutcome.SUCCESS)

    @property
    def rejected(self) -> int:
        return self._count(UploadOutcome.REJECTED)

    @property
    def failed_transport(self) -> int:
        return self._count(UploadOutcome.TRANSPORT_ERROR)

    @property
    def unreadable(self) -> int:
        return self._count(UploadOutcome.FILE_ERROR)


def build_upload_url(service_uri: str, chat_id: Optional[uuid.UUID] = None) -> str:
    """Global collection for a missing or nil chat id, the chat's own collection otherwise."""

    base_url = service_uri.rstrip("/")
    if chat_id is None or chat_id == NIL_CHAT_ID:
        return f"{base_url}/documents"
    return f"{base_url}/chats/{chat_id}/documents"


class DocumentUploader:
    """Uploads files one after another with no request timeout and no retries."""

    def __init__(
        self,
        service_uri: str,
        chat_id: Optional[uuid.UUID] = None,
        access_token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.url = build_upload_url(service_uri, chat_id)
        self._owns_client = client is None
        # large documents take a while to parse server side
        self.client = client or httpx.Client(timeout=None)
        # per request, so an injected client keeps its own headers
        self.headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}

    def __enter__(self) -> "DocumentUploader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def upload(self, path: Path) -> UploadResult:
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        try:
            file = path.open("rb")
        except OSError as exc:
            # removed or locked after resolution
            return UploadResult(path, UploadOutcome.FILE_ERROR, error=exc.strerror or str(exc))

        with file:
            try:
                response = self.client.post(
                    self.url,
                    files={FORM_FIELD: (path.name, file, content_type)},
                    headers=self.headers,
                )
            except httpx.RequestError as exc:
                logger.debug("Transport failure for %s", path, exc_info=True)
                return UploadResult(path, UploadOutcome.TRANSPORT_ERROR, error=str(exc) or exc.__class__.__name__)

        if not response.is_success:
            return UploadResult(
                path,
                UploadOutcome.REJECTED,
                status_code=response.status_code,
                reason=response.reason_phrase,
                body=response.text,
            )
        return UploadResult(path, UploadOutcome.SUCCESS, status_code=response.status_code)

    def upload_all(self, paths: Iterable[Path], journal: Optional[ImportJournal] = None) -> ImportReport:
        """Upload in order; stop at the first rejected file, continue past transport errors."""

        report = ImportReport()
        for path in paths:
            print(f"{path.name} - Uploading started.")
            result = self.upload(path)
            report.results.append(result)
            if journal is not None:
                journal.record("file_uploaded", result.as_details())

            if result.outcome is UploadOutcome.REJECTED:
                print(f"Error: {result.status_code} {result.reason}")
                print(result.body)
                report.aborted = True
                break
            if result.outcome in (UploadOutcome.TRANSPORT_ERROR, UploadOutcome.FILE_ERROR):
                print(f"{path.name} - Error: {result.error}")
                continue
            print(f"{path.name} - Uploading and parsing successful.")

        logger.debug(
            "Upload run finished: attempted=%s succeeded=%s rejected=%s transport_errors=%s unreadable=%s",
            report.attempted,
            report.succeeded,
            report.rejected,
            report.failed_transport,
            report.unreadable,
        )
        return report
