from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, Iterable

from .base import isoformat_or_none, parse_remote_time
from .document import Document
from .document_status import DocumentStatus


class DatasetStatus(str, Enum):
    PENDING = "pending"
    SYNCED = "synced"
    SYNC_FAILED = "sync_failed"


@dataclass
class Dataset:
    """Local mirror of a RAGFlow dataset."""
    name: str
    id: Optional[int] = None
    remote_id: Optional[str] = None
    description: Optional[str] = None
    chunk_method: Optional[str] = None
    parser_method: Optional[str] = None
    chunk_size: Optional[int] = None
    language: Optional[str] = None
    embedding_model: Optional[str] = None
    similarity_threshold: Optional[float] = None
    status: str = DatasetStatus.PENDING.value
    enabled: bool = True
    chunk_config: Optional[Dict[str, Any]] = None
    remote_create_time: Optional[datetime] = None
    remote_update_time: Optional[datetime] = None
    last_sync_time: Optional[datetime] = None
    create_time: datetime = field(default_factory=datetime.utcnow)
    update_time: datetime = field(default_factory=datetime.utcnow)

    def __str__(self) -> str:
        return self.name

    def apply_remote(self, data: Dict[str, Any]) -> None:
        """Copy identifiers and timestamps from a RAGFlow dataset payload."""
        if data.get("id"):
            self.remote_id = data["id"]
        self.remote_create_time = parse_remote_time(data.get("create_time") or data.get("create_date"))
        self.remote_update_time = parse_remote_time(data.get("update_time") or data.get("update_date"))
        self.mark_synced()

    def mark_synced(self) -> None:
        self.status = DatasetStatus.SYNCED.value
        self.last_sync_time = datetime.utcnow()
        self.update_time = self.last_sync_time

    def mark_sync_failed(self) -> None:
        self.status = DatasetStatus.SYNC_FAILED.value
        self.update_time = datetime.utcnow()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "remoteId": self.remote_id,
            "name": self.name,
            "description": self.description,
            "chunkMethod": self.chunk_method,
            "embeddingModel": self.embedding_model,
            "language": self.language,
            "status": self.status,
            "remoteCreateTime": isoformat_or_none(self.remote_create_time),
            "remoteUpdateTime": isoformat_or_none(self.remote_update_time),
            "lastSyncTime": isoformat_or_none(self.last_sync_time),
            "createTime": isoformat_or_none(self.create_time),
            "updateTime": isoformat_or_none(self.update_time),
        }

    def to_summary(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "remoteId": self.remote_id}


STATS_STATUSES = (
    DocumentStatus.PENDING,
    DocumentStatus.UPLOADING,
    DocumentStatus.UPLOADED,
    DocumentStatus.PROCESSING,
    DocumentStatus.COMPLETED,
    DocumentStatus.FAILED,
    DocumentStatus.SYNC_FAILED,
)

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(num_bytes: int) -> str:
    """Format a byte count using base 1024 units."""
    if num_bytes <= 0:
        return "0 B"

    unit_index = 0
    while num_bytes >= 1024 ** (unit_index + 1) and unit_index < len(SIZE_UNITS) - 1:
        unit_index += 1

    size = round(num_bytes / (1024 ** unit_index), 2)
    if size == int(size):
        size = int(size)
    return f"{size} {SIZE_UNITS[unit_index]}"


@dataclass
class DatasetDocumentStats:
    """Aggregate document statistics of a dataset."""
    total_count: int = 0
    total_size: int = 0
    completed_count: int = 0
    processing_count: int = 0
    failed_count: int = 0
    status_counts: Dict[str, int] = field(default_factory=dict)
    has_retry_required: bool = False

    @classmethod
    def from_documents(cls, documents: Iterable[Document]) -> "DatasetDocumentStats":
        stats = cls(status_counts={status.value: 0 for status in STATS_STATUSES})

        for document in documents:
            stats.total_count += 1
            stats.total_size += document.size or 0

            if document.status.is_completed:
                stats.completed_count += 1
            if document.status.is_processing:
                stats.processing_count += 1
            if document.status.is_failed:
                stats.failed_count += 1
            if document.status.value in stats.status_counts:
                stats.status_counts[document.status.value] += 1
            if document.is_upload_required():
                stats.has_retry_required = True

        return stats

    @property
    def total_size_formatted(self) -> str:
        return format_size(self.total_size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_count": self.total_count,
            "total_size": self.total_size,
            "total_size_formatted": self.total_size_formatted,
            "completed_count": self.completed_count,
            "processing_count": self.processing_count,
            "failed_count": self.failed_count,
            "status_counts": dict(self.status_counts),
            "has_retry_required": self.has_retry_required,
        }
