from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Any

from .base import isoformat_or_none as _iso
from .document_status import DocumentStatus


SUPPORTED_FILE_TYPES = (
    # documents
    "pdf", "doc", "docx", "txt", "md", "mdx",
    # spreadsheets
    "csv", "xlsx", "xls",
    # images
    "jpeg", "jpg", "png", "tif", "gif",
    # presentations
    "ppt", "pptx",
)

SUPPORTED_MIME_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "text/markdown",
    "text/csv",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/tiff",
    "image/gif",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
)


@dataclass
class Document:
    """Local mirror of a RAGFlow document."""
    dataset_id: int
    name: str
    id: Optional[int] = None
    remote_id: Optional[str] = None
    filename: Optional[str] = None
    file_path: Optional[str] = None
    type: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    status: DocumentStatus = DocumentStatus.PENDING
    parse_status: Optional[str] = None
    progress: Optional[float] = None
    progress_msg: Optional[str] = None
    language: Optional[str] = None
    chunk_count: Optional[int] = None
    summary: Optional[str] = None
    remote_create_time: Optional[datetime] = None
    remote_update_time: Optional[datetime] = None
    last_sync_time: Optional[datetime] = None
    create_time: datetime = field(default_factory=datetime.utcnow)
    update_time: datetime = field(default_factory=datetime.utcnow)

    def __str__(self) -> str:
        return self.name

    def set_status(self, status: Any) -> None:
        """Set status from a member, numeric code or RAGFlow run string."""
        converted = DocumentStatus.from_value(status)
        if converted is None:
            raise ValueError(
                f"Invalid document status value: {status!r}. "
                f"Expected DocumentStatus or compatible value."
            )
        self.status = converted
        self.update_time = datetime.utcnow()

    def mark_synced(self, remote_id: Optional[str] = None) -> None:
        if remote_id:
            self.remote_id = remote_id
        self.status = DocumentStatus.UPLOADED
        self.last_sync_time = datetime.utcnow()
        self.update_time = self.last_sync_time

    def is_upload_required(self) -> bool:
        return self.remote_id is None or self.status == DocumentStatus.SYNC_FAILED

    @staticmethod
    def is_file_type_supported(file_type: str) -> bool:
        return file_type.lower() in SUPPORTED_FILE_TYPES

    @staticmethod
    def is_mime_type_supported(mime_type: str) -> bool:
        return mime_type in SUPPORTED_MIME_TYPES

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "remoteId": self.remote_id,
            "datasetId": self.dataset_id,
            "name": self.name,
            "filename": self.filename,
            "type": self.type,
            "mimeType": self.mime_type,
            "size": self.size,
            "status": self.status.value,
            "statusLabel": self.status.label,
            "parseStatus": self.parse_status,
            "progress": self.progress,
            "progressMsg": self.progress_msg,
            "language": self.language,
            "chunkCount": self.chunk_count,
            "summary": self.summary,
            "remoteCreateTime": _iso(self.remote_create_time),
            "remoteUpdateTime": _iso(self.remote_update_time),
            "lastSyncTime": _iso(self.last_sync_time),
            "createTime": _iso(self.create_time),
            "updateTime": _iso(self.update_time),
        }
