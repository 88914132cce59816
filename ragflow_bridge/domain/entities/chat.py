from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any, List

from .base import isoformat_or_none, parse_remote_time


@dataclass
class ChatAssistant:
    """Local mirror of a RAGFlow chat assistant."""
    remote_id: str
    name: str
    id: Optional[int] = None
    dataset_id: Optional[int] = None
    dataset_ids: List[str] = field(default_factory=list)
    description: Optional[str] = None
    llm_model: Optional[str] = None
    system_prompt: Optional[str] = None
    language: Optional[str] = None
    config: Dict[str, Any] = field(default_factory=dict)
    status: Optional[str] = None
    remote_create_time: Optional[datetime] = None
    remote_update_time: Optional[datetime] = None
    last_sync_time: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any], dataset_id: Optional[int] = None) -> "ChatAssistant":
        """Build an assistant from a RAGFlow chat payload."""
        llm = data.get("llm") if isinstance(data.get("llm"), dict) else {}
        prompt = data.get("prompt") if isinstance(data.get("prompt"), dict) else {}
        dataset_ids = [
            item.get("id") if isinstance(item, dict) else item
            for item in data.get("dataset_ids") or data.get("datasets") or []
        ]

        return cls(
            remote_id=str(data.get("id", "")),
            name=data.get("name", ""),
            dataset_id=dataset_id,
            dataset_ids=[item for item in dataset_ids if item],
            description=data.get("description"),
            llm_model=llm.get("model_name"),
            system_prompt=prompt.get("prompt"),
            language=data.get("language"),
            config={"llm": llm, "prompt": prompt},
            status=data.get("status"),
            remote_create_time=parse_remote_time(data.get("create_time") or data.get("create_date")),
            remote_update_time=parse_remote_time(data.get("update_time") or data.get("update_date")),
            last_sync_time=datetime.utcnow(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "remoteId": self.remote_id,
            "name": self.name,
            "datasetId": self.dataset_id,
            "datasetIds": list(self.dataset_ids),
            "description": self.description,
            "llmModel": self.llm_model,
            "systemPrompt": self.system_prompt,
            "language": self.language,
            "status": self.status,
            "remoteCreateTime": isoformat_or_none(self.remote_create_time),
            "remoteUpdateTime": isoformat_or_none(self.remote_update_time),
            "lastSyncTime": isoformat_or_none(self.last_sync_time),
        }


@dataclass
class Conversation:
    """Local mirror of a RAGFlow chat session."""
    remote_id: str
    title: str
    id: Optional[int] = None
    chat_assistant_id: Optional[int] = None
    messages: List[Dict[str, Any]] = field(default_factory=list)
    message_count: int = 0
    status: Optional[str] = None
    last_activity_time: Optional[datetime] = None
    remote_create_time: Optional[datetime] = None
    remote_update_time: Optional[datetime] = None
    last_sync_time: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any], chat_assistant_id: Optional[int] = None) -> "Conversation":
        """Build a conversation from a RAGFlow session payload."""
        messages = data.get("messages") or []
        now = datetime.utcnow()

        return cls(
            remote_id=str(data.get("id", "")),
            title=data.get("name") or "New session",
            chat_assistant_id=chat_assistant_id,
            messages=messages,
            message_count=len(messages),
            status="active",
            last_activity_time=now,
            remote_create_time=parse_remote_time(data.get("create_time") or data.get("create_date")),
            remote_update_time=parse_remote_time(data.get("update_time") or data.get("update_date")),
            last_sync_time=now,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "remoteId": self.remote_id,
            "title": self.title,
            "chatAssistantId": self.chat_assistant_id,
            "messages": list(self.messages),
            "messageCount": self.message_count,
            "status": self.status,
            "lastActivityTime": isoformat_or_none(self.last_activity_time),
            "lastSyncTime": isoformat_or_none(self.last_sync_time),
        }
