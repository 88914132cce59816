"""Unit tests for SQLAlchemy repositories against in-memory sqlite"""

import pytest
from datetime import datetime

from ragflow_bridge.domain.entities.agent import Agent, AgentStatus
from ragflow_bridge.domain.entities.chat import ChatAssistant, Conversation
from ragflow_bridge.domain.entities.chunk import Chunk
from ragflow_bridge.domain.entities.dataset import Dataset, DatasetStatus
from ragflow_bridge.domain.entities.document import Document
from ragflow_bridge.domain.entities.document_status import DocumentStatus
from ragflow_bridge.infrastructure.repositories.agent_repository_impl import SqlAlchemyAgentRepository
from ragflow_bridge.infrastructure.repositories.chat_repository_impl import (
    SqlAlchemyChatAssistantRepository, SqlAlchemyConversationRepository
)
from ragflow_bridge.infrastructure.repositories.chunk_repository_impl import SqlAlchemyChunkRepository
from ragflow_bridge.infrastructure.repositories.dataset_repository_impl import SqlAlchemyDatasetRepository
from ragflow_bridge.infrastructure.repositories.document_repository_impl import SqlAlchemyDocumentRepository


@pytest.fixture
def dataset_repo(db_session):
    return SqlAlchemyDatasetRepository(db_session)


@pytest.fixture
def document_repo(db_session):
    return SqlAlchemyDocumentRepository(db_session)


async def _create_dataset(repo, name, remote_id=None, created=None):
    dataset = Dataset(name=name, remote_id=remote_id)
    if created:
        dataset.create_time = created
    return await repo.save(dataset)


class TestSqlAlchemyDatasetRepository:
    """Test dataset persistence"""

    @pytest.mark.asyncio
    async def test_save_and_lookup(self, dataset_repo):
        saved = await _create_dataset(dataset_repo, "Manuals", remote_id="ds-1")

        assert saved.id is not None
        assert (await dataset_repo.get_by_id(saved.id)).name == "Manuals"
        assert (await dataset_repo.get_by_remote_id("ds-1")).id == saved.id
        assert (await dataset_repo.get_by_name("Manuals")).remote_id == "ds-1"
        assert await dataset_repo.get_by_name("Missing") is None

    @pytest.mark.asyncio
    async def test_list_newest_first_with_total(self, dataset_repo):
        await _create_dataset(dataset_repo, "Old", created=datetime(2024, 1, 1))
        await _create_dataset(dataset_repo, "New", created=datetime(2024, 6, 1))
        await _create_dataset(dataset_repo, "Middle", created=datetime(2024, 3, 1))

        datasets, total = await dataset_repo.list(skip=0, limit=2)

        assert total == 3
        assert [dataset.name for dataset in datasets] == ["New", "Middle"]

    @pytest.mark.asyncio
    async def test_list_filters(self, dataset_repo):
        synced = await _create_dataset(dataset_repo, "Synced")
        synced.mark_synced()
        await dataset_repo.update(synced)
        await _create_dataset(dataset_repo, "Pending")

        datasets, total = await dataset_repo.list(status=DatasetStatus.SYNCED.value)
        by_name, _ = await dataset_repo.list(name="Pending")

        assert total == 1
        assert datasets[0].name == "Synced"
        assert [dataset.name for dataset in by_name] == ["Pending"]

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, dataset_repo):
        with pytest.raises(ValueError):
            await dataset_repo.update(Dataset(id=999, name="ghost"))

    @pytest.mark.asyncio
    async def test_delete_cascades_documents(self, dataset_repo, document_repo):
        dataset = await _create_dataset(dataset_repo, "Manuals")
        document = await document_repo.save(Document(dataset_id=dataset.id, name="a.txt"))

        assert await dataset_repo.delete(dataset.id) is True
        assert await dataset_repo.get_by_id(dataset.id) is None
        assert await document_repo.get_by_id(document.id) is None
        assert await dataset_repo.delete(dataset.id) is False


class TestSqlAlchemyDocumentRepository:
    """Test document persistence"""

    @pytest.mark.asyncio
    async def test_status_round_trips_as_enum(self, document_repo, dataset_repo):
        dataset = await _create_dataset(dataset_repo, "Manuals", remote_id="ds-1")
        document = await document_repo.save(
            Document(dataset_id=dataset.id, name="a.pdf", type="pdf", status=DocumentStatus.UPLOADED)
        )
        document.set_status(DocumentStatus.COMPLETED)
        document.chunk_count = 12
        await document_repo.update(document)

        loaded = await document_repo.get_by_id(document.id)

        assert loaded.status == DocumentStatus.COMPLETED
        assert loaded.chunk_count == 12

    @pytest.mark.asyncio
    async def test_list_by_dataset_filters(self, document_repo, dataset_repo):
        dataset = await _create_dataset(dataset_repo, "Manuals", remote_id="ds-1")
        await document_repo.save(Document(dataset_id=dataset.id, name="Manual-A.pdf", type="pdf"))
        await document_repo.save(Document(dataset_id=dataset.id, name="notes.txt", type="txt"))
        await document_repo.save(
            Document(dataset_id=dataset.id, name="manual-b.txt", type="txt", status=DocumentStatus.FAILED)
        )

        by_name, name_total = await document_repo.list_by_dataset(dataset.id, name="manual")
        by_type, _ = await document_repo.list_by_dataset(dataset.id, type="txt")
        by_status, _ = await document_repo.list_by_dataset(dataset.id, status="failed")
        page, total = await document_repo.list_by_dataset(dataset.id, skip=1, limit=1)

        assert name_total == 2
        assert sorted(document.name for document in by_name) == ["Manual-A.pdf", "manual-b.txt"]
        assert len(by_type) == 2
        assert [document.name for document in by_status] == ["manual-b.txt"]
        assert total == 3
        assert len(page) == 1

    @pytest.mark.asyncio
    async def test_failed_and_all_by_dataset(self, document_repo, dataset_repo):
        dataset = await _create_dataset(dataset_repo, "Manuals", remote_id="ds-1")
        other = await _create_dataset(dataset_repo, "Other")
        await document_repo.save(Document(dataset_id=dataset.id, name="ok.txt", status=DocumentStatus.COMPLETED))
        await document_repo.save(Document(dataset_id=dataset.id, name="bad.txt", status=DocumentStatus.FAILED))
        await document_repo.save(Document(dataset_id=dataset.id, name="unsent.txt", status=DocumentStatus.SYNC_FAILED))
        await document_repo.save(Document(dataset_id=other.id, name="elsewhere.txt", status=DocumentStatus.FAILED))

        failed = await document_repo.get_failed_by_dataset(dataset.id)
        everything = await document_repo.get_all_by_dataset(dataset.id)

        assert sorted(document.name for document in failed) == ["bad.txt", "unsent.txt"]
        assert len(everything) == 3

    @pytest.mark.asyncio
    async def test_delete(self, document_repo, dataset_repo):
        dataset = await _create_dataset(dataset_repo, "Manuals", remote_id="ds-1")
        document = await document_repo.save(Document(dataset_id=dataset.id, name="a.txt"))

        assert await document_repo.delete(document.id) is True
        assert await document_repo.delete(document.id) is False


class TestSqlAlchemyChatRepositories:
    """Test chat assistant and conversation mirrors"""

    @pytest.mark.asyncio
    async def test_assistant_upsert_updates_existing(self, db_session):
        repo = SqlAlchemyChatAssistantRepository(db_session)

        first = await repo.upsert(ChatAssistant(remote_id="chat-1", name="Support", dataset_ids=["ds-1"]))
        second = await repo.upsert(ChatAssistant(remote_id="chat-1", name="Helpdesk"))

        assert first.id == second.id
        loaded = await repo.get_by_remote_id("chat-1")
        assert loaded.name == "Helpdesk"
        assert loaded.dataset_ids == []

    @pytest.mark.asyncio
    async def test_assistant_delete_removes_conversations(self, db_session):
        assistants = SqlAlchemyChatAssistantRepository(db_session)
        conversations = SqlAlchemyConversationRepository(db_session)
        assistant = await assistants.upsert(ChatAssistant(remote_id="chat-1", name="Support"))
        await conversations.upsert(Conversation(remote_id="session-1", title="Billing", chat_assistant_id=assistant.id))

        assert await assistants.delete_by_remote_id("chat-1") is True
        assert await assistants.get_by_remote_id("chat-1") is None
        assert await conversations.get_by_remote_id("session-1") is None
        assert await assistants.delete_by_remote_id("chat-1") is False

    @pytest.mark.asyncio
    async def test_conversation_messages_persist(self, db_session):
        repo = SqlAlchemyConversationRepository(db_session)
        conversation = Conversation(remote_id="session-1", title="Billing")
        conversation.messages.append({"role": "user", "content": "Hi"})
        conversation.message_count = 1

        await repo.upsert(conversation)
        loaded = await repo.get_by_remote_id("session-1")

        assert loaded.messages == [{"role": "user", "content": "Hi"}]
        assert loaded.message_count == 1


class TestSqlAlchemyChunkRepository:
    """Test chunk mirrors"""

    @pytest.fixture
    def chunk_repo(self, db_session):
        return SqlAlchemyChunkRepository(db_session)

    async def _document(self, dataset_repo, document_repo):
        dataset = await _create_dataset(dataset_repo, "Manuals", remote_id="ds-1")
        return await document_repo.save(Document(dataset_id=dataset.id, name="guide.pdf", remote_id="doc-1"))

    @pytest.mark.asyncio
    async def test_upsert_updates_by_remote_id(self, chunk_repo, dataset_repo, document_repo):
        document = await self._document(dataset_repo, document_repo)

        first = await chunk_repo.upsert(Chunk(remote_id="c1", document_id=document.id, content="old", position=0))
        second = await chunk_repo.upsert(Chunk(
            remote_id="c1", document_id=document.id, content="new", position=0, keywords=["reset"]
        ))

        chunks, total = await chunk_repo.list_by_document(document.id)
        assert first.id == second.id
        assert total == 1
        assert chunks[0].content == "new"
        assert chunks[0].keywords == ["reset"]

    @pytest.mark.asyncio
    async def test_delete_stale_and_order(self, chunk_repo, dataset_repo, document_repo):
        document = await self._document(dataset_repo, document_repo)
        for position, remote_id in enumerate(["c1", "c2", "c3"]):
            await chunk_repo.upsert(Chunk(remote_id=remote_id, document_id=document.id, position=2 - position))

        removed = await chunk_repo.delete_stale(document.id, ["c1", "c3"])

        chunks, total = await chunk_repo.list_by_document(document.id)
        assert removed == 1
        assert [chunk.remote_id for chunk in chunks] == ["c3", "c1"]

    @pytest.mark.asyncio
    async def test_deleting_document_removes_chunks(self, chunk_repo, dataset_repo, document_repo):
        document = await self._document(dataset_repo, document_repo)
        await chunk_repo.upsert(Chunk(remote_id="c1", document_id=document.id))

        await document_repo.delete(document.id)

        assert await chunk_repo.list_by_document(document.id) == ([], 0)


class TestSqlAlchemyAgentRepository:
    """Test agent persistence"""

    @pytest.fixture
    def agent_repo(self, db_session):
        return SqlAlchemyAgentRepository(db_session)

    @pytest.mark.asyncio
    async def test_save_and_get_keeps_dsl(self, agent_repo):
        saved = await agent_repo.save(Agent(title="Triage", dsl={"components": {"begin": {}}}))

        loaded = await agent_repo.get_by_id(saved.id)

        assert loaded.title == "Triage"
        assert loaded.dsl == {"components": {"begin": {}}}
        assert loaded.status == AgentStatus.DRAFT.value

    @pytest.mark.asyncio
    async def test_needing_sync_and_counts(self, agent_repo):
        draft = await agent_repo.save(Agent(title="Draft"))
        published = await agent_repo.save(Agent(title="Live", remote_id="agent-1", status=AgentStatus.PUBLISHED.value))
        failed = await agent_repo.save(Agent(title="Broken", remote_id="agent-2", status=AgentStatus.SYNC_FAILED.value))

        needing = await agent_repo.get_needing_sync()

        assert [agent.id for agent in needing] == [draft.id, failed.id]
        assert published.id not in [agent.id for agent in needing]
        assert await agent_repo.count_by_status() == {"draft": 1, "published": 1, "sync_failed": 1}

    @pytest.mark.asyncio
    async def test_list_filters_by_status(self, agent_repo):
        await agent_repo.save(Agent(title="Draft", create_time=datetime(2024, 1, 1)))
        await agent_repo.save(Agent(title="Live", remote_id="agent-1", status=AgentStatus.PUBLISHED.value))

        agents, total = await agent_repo.list(status="draft")

        assert total == 1
        assert agents[0].title == "Draft"

    @pytest.mark.asyncio
    async def test_update_and_delete(self, agent_repo):
        agent = await agent_repo.save(Agent(title="Draft"))
        agent.mark_sync_failed("quota")

        await agent_repo.update(agent)
        assert (await agent_repo.get_by_id(agent.id)).sync_error_message == "quota"

        assert await agent_repo.delete(agent.id) is True
        assert await agent_repo.get_by_id(agent.id) is None
