"""Document lifecycle status"""

from enum import Enum
from typing import Dict, List, Optional, Union


class DocumentStatus(str, Enum):
    PENDING = "pending"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    SYNCED = "synced"
    SYNC_FAILED = "sync_failed"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def css_class(self) -> str:
        return _CSS_CLASSES[self]

    @property
    def is_processing(self) -> bool:
        return self in (DocumentStatus.UPLOADING, DocumentStatus.PROCESSING)

    @property
    def is_completed(self) -> bool:
        return self in (DocumentStatus.COMPLETED, DocumentStatus.UPLOADED)

    @property
    def is_failed(self) -> bool:
        return self in (DocumentStatus.FAILED, DocumentStatus.SYNC_FAILED)

    @property
    def needs_retry(self) -> bool:
        return self.is_failed

    def to_numeric(self) -> int:
        """Numeric run code used by RAGFlow."""
        return _TO_NUMERIC[self]

    @classmethod
    def get_values(cls) -> List[str]:
        return [status.value for status in cls]

    @classmethod
    def get_choices(cls) -> Dict[str, str]:
        return {status.label: status.value for status in cls}

    @classmethod
    def from_value(cls, value: Union["DocumentStatus", str, int, None]) -> Optional["DocumentStatus"]:
        """Convert a numeric code, RAGFlow run string or status value.

        Returns None when the value cannot be mapped.
        """
        if value is None:
            return None

        if isinstance(value, cls):
            return value

        if isinstance(value, bool):
            return None

        if isinstance(value, int):
            return _FROM_NUMERIC.get(value)

        if not isinstance(value, str):
            return None

        if value.isdigit():
            return _FROM_NUMERIC.get(int(value))

        if value in _FROM_RUN_STRING:
            return _FROM_RUN_STRING[value]

        try:
            return cls(value)
        except ValueError:
            return None


_LABELS = {
    DocumentStatus.PENDING: "Pending",
    DocumentStatus.UPLOADING: "Uploading",
    DocumentStatus.UPLOADED: "Uploaded",
    DocumentStatus.PROCESSING: "Processing",
    DocumentStatus.COMPLETED: "Completed",
    DocumentStatus.FAILED: "Failed",
    DocumentStatus.SYNCED: "Synced",
    DocumentStatus.SYNC_FAILED: "Sync failed",
}

_CSS_CLASSES = {
    DocumentStatus.PENDING: "secondary",
    DocumentStatus.UPLOADING: "warning",
    DocumentStatus.UPLOADED: "info",
    DocumentStatus.PROCESSING: "warning",
    DocumentStatus.COMPLETED: "success",
    DocumentStatus.FAILED: "danger",
    DocumentStatus.SYNCED: "success",
    DocumentStatus.SYNC_FAILED: "danger",
}

_FROM_NUMERIC = {
    0: DocumentStatus.PENDING,
    1: DocumentStatus.UPLOADED,
    2: DocumentStatus.PROCESSING,
    3: DocumentStatus.COMPLETED,
    4: DocumentStatus.FAILED,
}

_TO_NUMERIC = {
    DocumentStatus.PENDING: 0,
    DocumentStatus.UPLOADING: 0,
    DocumentStatus.UPLOADED: 1,
    DocumentStatus.PROCESSING: 2,
    DocumentStatus.COMPLETED: 3,
    DocumentStatus.SYNCED: 3,
    DocumentStatus.FAILED: 4,
    DocumentStatus.SYNC_FAILED: 4,
}

# RAGFlow run values
_FROM_RUN_STRING = {
    "parsing": DocumentStatus.PROCESSING,
    "parsed": DocumentStatus.COMPLETED,
    "parse_failed": DocumentStatus.FAILED,
}
