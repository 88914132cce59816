from sqlalchemy.orm import Session

from shared.config.settings import Settings
from ..helpers.document import (
    DocumentBatchDeleter, DocumentChunkSyncer, DocumentRetryHandler,
    DocumentStatusUpdater, DocumentUploadHandler
)
from ..use_cases.agent_use_cases import AgentUseCase
from ..use_cases.chunk_use_cases import ChunkUseCase
from ..use_cases.conversation_use_cases import ConversationUseCase
from ..use_cases.dataset_document_use_cases import DatasetDocumentUseCase
from ..use_cases.dataset_use_cases import DatasetDefaults, DatasetUseCase
from ..use_cases.knowledge_graph_use_cases import KnowledgeGraphUseCase
from ..use_cases.system_use_cases import SystemUseCase
from ..validators import DocumentValidator, FileUploadValidator
from .agent_sync_service import AgentSyncService
from .document_upload_service import DocumentUploadService
from ...domain.repositories.agent_repository import AgentRepository
from ...domain.repositories.chat_repository import ChatAssistantRepository, ConversationRepository
from ...domain.repositories.chunk_repository import ChunkRepository
from ...domain.repositories.dataset_repository import DatasetRepository
from ...domain.repositories.document_repository import DocumentRepository
from ...infrastructure.external.ragflow_client import RAGFlowClient
from ...infrastructure.repositories.agent_repository_impl import SqlAlchemyAgentRepository
from ...infrastructure.repositories.chat_repository_impl import (
    SqlAlchemyChatAssistantRepository, SqlAlchemyConversationRepository
)
from ...infrastructure.repositories.chunk_repository_impl import SqlAlchemyChunkRepository
from ...infrastructure.repositories.dataset_repository_impl import SqlAlchemyDatasetRepository
from ...infrastructure.repositories.document_repository_impl import SqlAlchemyDocumentRepository


class DIContainer:
    """Dependency injection container for the application."""

    def __init__(self, db_session: Session, client: RAGFlowClient, settings: Settings):
        self.db_session = db_session
        self.client = client
        self.settings = settings

    def get_dataset_repository(self) -> DatasetRepository:
        """Get dataset repository instance."""
        return SqlAlchemyDatasetRepository(self.db_session)

    def get_document_repository(self) -> DocumentRepository:
        """Get document repository instance."""
        return SqlAlchemyDocumentRepository(self.db_session)

    def get_chat_assistant_repository(self) -> ChatAssistantRepository:
        """Get chat assistant repository instance."""
        return SqlAlchemyChatAssistantRepository(self.db_session)

    def get_conversation_repository(self) -> ConversationRepository:
        """Get conversation repository instance."""
        return SqlAlchemyConversationRepository(self.db_session)

    def get_chunk_repository(self) -> ChunkRepository:
        """Get chunk repository instance."""
        return SqlAlchemyChunkRepository(self.db_session)

    def get_agent_repository(self) -> AgentRepository:
        """Get agent repository instance."""
        return SqlAlchemyAgentRepository(self.db_session)

    def get_document_validator(self) -> DocumentValidator:
        """Get document validator instance."""
        return DocumentValidator(self.get_dataset_repository(), self.get_document_repository())

    def get_upload_service(self) -> DocumentUploadService:
        """Get document upload service instance."""
        return DocumentUploadService(
            document_repo=self.get_document_repository(),
            client=self.client,
            validator=FileUploadValidator(max_size=self.settings.max_upload_size),
            upload_dir=self.settings.upload_dir
        )

    def get_dataset_use_case(self) -> DatasetUseCase:
        """Get dataset use case instance."""
        return DatasetUseCase(
            dataset_repository=self.get_dataset_repository(),
            document_repository=self.get_document_repository(),
            client=self.client,
            defaults=DatasetDefaults(
                chunk_method=self.settings.default_chunk_method,
                embedding_model=self.settings.default_embedding_model
            )
        )

    def get_dataset_document_use_case(self) -> DatasetDocumentUseCase:
        """Get dataset document use case instance."""
        validator = self.get_document_validator()
        document_repo = validator.document_repo
        return DatasetDocumentUseCase(
            validator=validator,
            upload_handler=DocumentUploadHandler(self.get_upload_service()),
            status_updater=DocumentStatusUpdater(document_repo, self.client),
            retry_handler=DocumentRetryHandler(document_repo, self.client),
            batch_deleter=DocumentBatchDeleter(document_repo, self.client),
            chunk_syncer=DocumentChunkSyncer(self.get_chunk_repository(), document_repo, self.client)
        )

    def get_conversation_use_case(self) -> ConversationUseCase:
        """Get conversation use case instance."""
        return ConversationUseCase(
            client=self.client,
            assistant_repository=self.get_chat_assistant_repository(),
            conversation_repository=self.get_conversation_repository(),
            dataset_repository=self.get_dataset_repository()
        )

    def get_chunk_use_case(self) -> ChunkUseCase:
        """Get chunk use case instance."""
        return ChunkUseCase(self.client)

    def get_knowledge_graph_use_case(self) -> KnowledgeGraphUseCase:
        """Get knowledge graph use case instance."""
        return KnowledgeGraphUseCase(self.client)

    def get_system_use_case(self) -> SystemUseCase:
        """Get system use case instance."""
        return SystemUseCase(self.client, version=self.settings.service_version)

    def get_agent_use_case(self) -> AgentUseCase:
        """Get agent use case instance."""
        agent_repo = self.get_agent_repository()
        return AgentUseCase(agent_repo, AgentSyncService(agent_repo, self.client))
