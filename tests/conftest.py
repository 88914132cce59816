"""Pytest configuration and fixtures for RAGFlow bridge tests"""

import pytest
from unittest.mock import Mock, AsyncMock
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.config.settings import RAGFlowInstance
from shared.utils.database import Base
from ragflow_bridge.application.services.di_container import DIContainer
from ragflow_bridge.domain.entities.dataset import Dataset, DatasetStatus
from ragflow_bridge.domain.entities.document import Document
from ragflow_bridge.domain.entities.document_status import DocumentStatus
from ragflow_bridge.domain.repositories.agent_repository import AgentRepository
from ragflow_bridge.domain.repositories.chat_repository import ChatAssistantRepository, ConversationRepository
from ragflow_bridge.domain.repositories.chunk_repository import ChunkRepository
from ragflow_bridge.domain.repositories.dataset_repository import DatasetRepository
from ragflow_bridge.domain.repositories.document_repository import DocumentRepository
from ragflow_bridge.infrastructure.database import models  # noqa: F401
from ragflow_bridge.infrastructure.external.ragflow_client import RAGFlowClient
from ragflow_bridge.presentation.api.app import create_application
from ragflow_bridge.presentation.api.dependencies import get_di_container


@pytest.fixture
def ragflow_instance():
    """RAGFlow instance used by client tests"""
    return RAGFlowInstance(name="test", api_url="http://ragflow.test", api_key="test-key", timeout=5.0)


@pytest.fixture
def mock_dataset_repository():
    """Mock dataset repository"""
    mock = Mock(spec=DatasetRepository)
    mock.save = AsyncMock(side_effect=lambda dataset: _with_id(dataset, 1))
    mock.get_by_id = AsyncMock(return_value=None)
    mock.get_by_remote_id = AsyncMock(return_value=None)
    mock.get_by_name = AsyncMock(return_value=None)
    mock.list = AsyncMock(return_value=([], 0))
    mock.update = AsyncMock(side_effect=lambda dataset: dataset)
    mock.delete = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def mock_document_repository():
    """Mock document repository"""
    mock = Mock(spec=DocumentRepository)
    mock.save = AsyncMock(side_effect=lambda document: _with_id(document, 10))
    mock.get_by_id = AsyncMock(return_value=None)
    mock.list_by_dataset = AsyncMock(return_value=([], 0))
    mock.get_all_by_dataset = AsyncMock(return_value=[])
    mock.get_failed_by_dataset = AsyncMock(return_value=[])
    mock.update = AsyncMock(side_effect=lambda document: document)
    mock.delete = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def mock_assistant_repository():
    """Mock chat assistant repository"""
    mock = Mock(spec=ChatAssistantRepository)
    mock.upsert = AsyncMock(side_effect=lambda assistant: _with_id(assistant, 5))
    mock.get_by_remote_id = AsyncMock(return_value=None)
    mock.delete_by_remote_id = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def mock_conversation_repository():
    """Mock conversation repository"""
    mock = Mock(spec=ConversationRepository)
    mock.upsert = AsyncMock(side_effect=lambda conversation: _with_id(conversation, 7))
    mock.get_by_remote_id = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def mock_agent_repository():
    """Mock agent repository"""
    mock = Mock(spec=AgentRepository)
    mock.save = AsyncMock(side_effect=lambda agent: _with_id(agent, 3))
    mock.get_by_id = AsyncMock(return_value=None)
    mock.list = AsyncMock(return_value=([], 0))
    mock.get_needing_sync = AsyncMock(return_value=[])
    mock.count_by_status = AsyncMock(return_value={})
    mock.update = AsyncMock(side_effect=lambda agent: agent)
    mock.delete = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def mock_chunk_repository():
    """Mock chunk repository"""
    mock = Mock(spec=ChunkRepository)
    mock.upsert = AsyncMock(side_effect=lambda chunk: chunk)
    mock.list_by_document = AsyncMock(return_value=([], 0))
    mock.delete_stale = AsyncMock(return_value=0)
    return mock


@pytest.fixture
def mock_client():
    """Mock RAGFlow API client"""
    mock = Mock(spec=RAGFlowClient)
    for name in (
        "health_check", "create_dataset", "list_datasets", "update_dataset", "delete_datasets",
        "get_knowledge_graph", "upload_documents", "list_documents", "delete_documents",
        "parse_documents", "stop_parsing", "get_parse_status", "add_chunk", "update_chunk",
        "delete_chunks", "retrieve", "create_chat", "list_chats", "update_chat", "delete_chats",
        "create_session", "list_sessions", "send_message", "list_chunks", "openai_chat_completion",
        "create_agent", "list_agents", "update_agent", "delete_agent", "close",
    ):
        setattr(mock, name, AsyncMock())
    return mock


@pytest.fixture
def sample_dataset():
    """Dataset synced to RAGFlow"""
    return Dataset(
        id=1,
        name="Product manuals",
        remote_id="ds-remote-1",
        description="Manuals for every product line",
        chunk_method="naive",
        embedding_model="BAAI/bge-large-zh-v1.5",
        status=DatasetStatus.SYNCED.value,
        create_time=datetime(2024, 1, 1, 12, 0, 0),
        update_time=datetime(2024, 1, 1, 12, 0, 0)
    )


@pytest.fixture
def sample_document(tmp_path):
    """Uploaded document with a stored local copy"""
    file_path = tmp_path / "manual.pdf"
    file_path.write_bytes(b"%PDF-1.4 test content")
    return Document(
        id=10,
        dataset_id=1,
        name="manual.pdf",
        filename="manual.pdf",
        file_path=str(file_path),
        remote_id="doc-remote-1",
        type="pdf",
        mime_type="application/pdf",
        size=21,
        status=DocumentStatus.UPLOADED
    )


@pytest.fixture
def db_session():
    """In-memory sqlite session with all tables created"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mock_container():
    """Mock dependency injection container"""
    return Mock(spec=DIContainer)


@pytest.fixture
def app_with_mocks(mock_container):
    """Create FastAPI app with mocked dependencies"""
    app = create_application()
    app.dependency_overrides[get_di_container] = lambda: mock_container
    return app


@pytest.fixture
def client(app_with_mocks):
    """Create test client"""
    return TestClient(app_with_mocks)


def _with_id(entity, entity_id):
    entity.id = entity_id
    return entity
