"""Unit tests for DIContainer wiring"""

from shared.config.settings import Settings
from ragflow_bridge.application.services.di_container import DIContainer
from ragflow_bridge.application.use_cases.agent_use_cases import AgentUseCase
from ragflow_bridge.application.use_cases.dataset_document_use_cases import DatasetDocumentUseCase
from ragflow_bridge.application.use_cases.dataset_use_cases import DatasetUseCase
from ragflow_bridge.infrastructure.repositories.document_repository_impl import SqlAlchemyDocumentRepository


class TestDIContainer:
    """Test DIContainer"""

    def test_dataset_use_case_uses_configured_defaults(self, db_session, mock_client):
        settings = Settings(default_chunk_method="book", default_embedding_model="custom-embedding")
        container = DIContainer(db_session, mock_client, settings)

        use_case = container.get_dataset_use_case()

        assert isinstance(use_case, DatasetUseCase)
        assert use_case.client is mock_client
        assert use_case.defaults.chunk_method == "book"
        assert use_case.defaults.embedding_model == "custom-embedding"

    def test_document_helpers_share_one_repository(self, db_session, mock_client, tmp_path):
        settings = Settings(upload_dir=str(tmp_path), max_upload_size=1024)
        container = DIContainer(db_session, mock_client, settings)

        use_case = container.get_dataset_document_use_case()

        assert isinstance(use_case, DatasetDocumentUseCase)
        assert isinstance(use_case.document_repo, SqlAlchemyDocumentRepository)
        assert use_case.status_updater.document_repo is use_case.document_repo
        assert use_case.retry_handler.document_repo is use_case.document_repo
        assert use_case.batch_deleter.document_repo is use_case.document_repo
        assert use_case.chunk_syncer.document_repo is use_case.document_repo
        assert use_case.upload_handler.upload_service.validator.max_size == 1024
        assert use_case.upload_handler.upload_service.upload_dir == str(tmp_path)

    def test_system_use_case_reports_service_version(self, db_session, mock_client):
        container = DIContainer(db_session, mock_client, Settings(service_version="2.1.0"))

        assert container.get_system_use_case().version == "2.1.0"

    def test_agent_use_case_shares_repository_with_sync(self, db_session, mock_client):
        container = DIContainer(db_session, mock_client, Settings())

        use_case = container.get_agent_use_case()

        assert isinstance(use_case, AgentUseCase)
        assert use_case.sync_service.agent_repo is use_case.agent_repository
        assert use_case.sync_service.client is mock_client
