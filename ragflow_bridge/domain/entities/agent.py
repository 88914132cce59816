from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any

from .base import isoformat_or_none, parse_remote_time

TITLE_MAX_LENGTH = 255


class AgentStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    SYNC_FAILED = "sync_failed"

    @classmethod
    def get_values(cls):
        return [status.value for status in cls]


@dataclass
class Agent:
    """Local agent definition pushed to RAGFlow."""
    title: str
    id: Optional[int] = None
    remote_id: Optional[str] = None
    description: Optional[str] = None
    dsl: Dict[str, Any] = field(default_factory=dict)
    status: str = AgentStatus.DRAFT.value
    remote_create_time: Optional[datetime] = None
    remote_update_time: Optional[datetime] = None
    last_sync_time: Optional[datetime] = None
    sync_error_message: Optional[str] = None
    create_time: datetime = field(default_factory=datetime.utcnow)
    update_time: datetime = field(default_factory=datetime.utcnow)

    def __str__(self) -> str:
        return self.title

    def needs_sync(self) -> bool:
        return self.remote_id is None or self.status == AgentStatus.SYNC_FAILED.value

    def apply_remote(self, data: Dict[str, Any]) -> None:
        """Copy identifiers and timestamps from a RAGFlow agent payload."""
        if data.get("id"):
            self.remote_id = data["id"]
        self.remote_create_time = parse_remote_time(data.get("create_time") or data.get("create_date"))
        self.remote_update_time = parse_remote_time(data.get("update_time") or data.get("update_date"))

    def mark_synced(self) -> None:
        self.status = AgentStatus.PUBLISHED.value
        self.sync_error_message = None
        self.last_sync_time = datetime.utcnow()
        self.update_time = self.last_sync_time

    def mark_sync_failed(self, message: str) -> None:
        self.status = AgentStatus.SYNC_FAILED.value
        self.sync_error_message = message
        self.update_time = datetime.utcnow()

    def to_dict(self, include_dsl: bool = False) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "remoteId": self.remote_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "syncErrorMessage": self.sync_error_message,
            "remoteCreateTime": isoformat_or_none(self.remote_create_time),
            "remoteUpdateTime": isoformat_or_none(self.remote_update_time),
            "lastSyncTime": isoformat_or_none(self.last_sync_time),
            "createTime": isoformat_or_none(self.create_time),
            "updateTime": isoformat_or_none(self.update_time),
        }
        if include_dsl:
            data["dsl"] = dict(self.dsl)
        return data
