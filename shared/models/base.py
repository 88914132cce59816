from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


def utc_timestamp() -> str:
    return datetime.utcnow().isoformat()


class BaseResponse(BaseModel):
    status: str = "success"
    message: Optional[str] = None
    data: Any = None
    timestamp: str = Field(default_factory=utc_timestamp)


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str
    error: Optional[str] = None
    timestamp: str = Field(default_factory=utc_timestamp)


class DatasetCreateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    chunk_method: Optional[str] = None
    embedding_model: Optional[str] = None
    language: Optional[str] = None


class DatasetUpdateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    chunk_method: Optional[str] = None
    embedding_model: Optional[str] = None
    language: Optional[str] = None


class BatchDeleteRequest(BaseModel):
    document_ids: List[Any] = Field(default_factory=list)


class ConversationCreateRequest(BaseModel):
    name: Optional[str] = None
    dataset_ids: List[str] = Field(default_factory=list)
    options: Optional[Dict[str, Any]] = None


class AgentCreateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    dsl: Any = None
    auto_sync: bool = False


class EntitySearchRequest(BaseModel):
    query: Optional[str] = None
    entity_type: Optional[str] = None
    limit: int = Field(default=20, ge=1, le=1000)


class HealthCheck(BaseModel):
    service_name: str
    status: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    details: Dict[str, Any] = Field(default_factory=dict)
