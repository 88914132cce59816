"""Unit tests for agent sync and agent use cases"""

import pytest

from ragflow_bridge.application.services.agent_sync_service import AgentSyncService
from ragflow_bridge.application.use_cases.agent_use_cases import AgentUseCase
from ragflow_bridge.domain.entities.agent import Agent, AgentStatus
from ragflow_bridge.domain.exceptions import RAGFlowApiError, ResourceNotFoundError


@pytest.fixture
def sync_service(mock_agent_repository, mock_client):
    return AgentSyncService(mock_agent_repository, mock_client)


@pytest.fixture
def draft_agent():
    return Agent(id=3, title="Support triage", description="Routes tickets", dsl={"components": {}})


class TestAgentSyncService:
    """Test AgentSyncService"""

    @pytest.mark.asyncio
    async def test_create_resolves_remote_id_by_title(self, sync_service, mock_client, draft_agent):
        mock_client.create_agent.return_value = True
        mock_client.list_agents.return_value = [{"id": "agent-remote-1", "title": "Support triage"}]

        result = await sync_service.push(draft_agent)

        assert result["success"] is True
        assert result["message"] == "Agent created in RAGFlow"
        assert draft_agent.remote_id == "agent-remote-1"
        assert draft_agent.status == AgentStatus.PUBLISHED.value
        assert draft_agent.last_sync_time is not None
        mock_client.create_agent.assert_awaited_once_with(
            "Support triage", {"components": {}}, description="Routes tickets"
        )

    @pytest.mark.asyncio
    async def test_existing_agent_is_updated(self, sync_service, mock_client, draft_agent):
        draft_agent.remote_id = "agent-remote-1"

        result = await sync_service.push(draft_agent)

        assert result["message"] == "Agent updated in RAGFlow"
        mock_client.create_agent.assert_not_awaited()
        mock_client.update_agent.assert_awaited_once_with(
            "agent-remote-1",
            {"title": "Support triage", "description": "Routes tickets", "dsl": {"components": {}}}
        )

    @pytest.mark.asyncio
    async def test_failure_marks_agent(self, sync_service, mock_client, mock_agent_repository, draft_agent):
        mock_client.create_agent.side_effect = RAGFlowApiError("invalid dsl", code=102)

        result = await sync_service.push(draft_agent)

        assert result == {
            "success": False,
            "message": "Agent sync failed: invalid dsl (code 102)",
            "error": "invalid dsl (code 102)",
        }
        assert draft_agent.status == AgentStatus.SYNC_FAILED.value
        assert draft_agent.sync_error_message == "invalid dsl (code 102)"
        mock_agent_repository.update.assert_awaited_once_with(draft_agent)

    @pytest.mark.asyncio
    async def test_sync_all_reports_each_agent(self, sync_service, mock_client, mock_agent_repository, draft_agent):
        broken = Agent(id=4, title="Broken", status=AgentStatus.SYNC_FAILED.value)
        mock_agent_repository.get_needing_sync.return_value = [draft_agent, broken]
        mock_client.create_agent.side_effect = [{"id": "agent-remote-1"}, RAGFlowApiError("quota")]

        result = await sync_service.sync_all()

        assert result["success"] is False
        assert result["message"] == "Sync completed: 1 successful, 1 failed"
        assert result["data"]["total"] == 2
        assert [item["success"] for item in result["data"]["results"]] == [True, False]
        assert result["data"]["results"][1]["title"] == "Broken"

    @pytest.mark.asyncio
    async def test_local_only_agent_skips_remote_delete(self, sync_service, mock_client, draft_agent):
        await sync_service.delete_remote(draft_agent)

        mock_client.delete_agent.assert_not_awaited()


class TestAgentUseCase:
    """Test AgentUseCase"""

    @pytest.fixture
    def use_case(self, mock_agent_repository, sync_service):
        return AgentUseCase(mock_agent_repository, sync_service)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title, message", [
        (None, "Agent title is required"),
        ("   ", "Agent title is required"),
        ("x" * 256, "must not exceed 255 characters"),
    ])
    async def test_create_validates_title(self, use_case, mock_agent_repository, title, message):
        with pytest.raises(ValueError, match=message):
            await use_case.create_agent(title)
        mock_agent_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_draft(self, use_case, mock_client):
        change = await use_case.create_agent("  Support triage ", dsl="not a dict")

        assert change.agent.id == 3
        assert change.agent.title == "Support triage"
        assert change.agent.dsl == {}
        assert change.agent.status == AgentStatus.DRAFT.value
        assert change.sync is None
        mock_client.create_agent.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_with_auto_sync(self, use_case, mock_client):
        mock_client.create_agent.return_value = {"id": "agent-remote-9"}

        change = await use_case.create_agent("Support triage", auto_sync=True)

        data = change.to_dict()
        assert data["remoteId"] == "agent-remote-9"
        assert data["sync"] == {"success": True, "message": "Agent created in RAGFlow"}

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_status(self, use_case):
        with pytest.raises(ValueError, match="Invalid status: archived"):
            await use_case.list_agents(status="archived")

    @pytest.mark.asyncio
    async def test_list_paginates(self, use_case, mock_agent_repository, draft_agent):
        mock_agent_repository.list.return_value = ([draft_agent], 21)

        page = await use_case.list_agents(page=2, limit=10, status="draft")

        assert page.total == 21
        mock_agent_repository.list.assert_awaited_once_with(status="draft", skip=10, limit=10)

    @pytest.mark.asyncio
    async def test_get_missing_agent(self, use_case):
        with pytest.raises(ResourceNotFoundError, match="Agent 8 not found"):
            await use_case.get_agent(8)

    @pytest.mark.asyncio
    async def test_update_ignores_unknown_fields(self, use_case, mock_agent_repository, draft_agent):
        mock_agent_repository.get_by_id.return_value = draft_agent

        with pytest.raises(ValueError, match="Update data is required"):
            await use_case.update_agent(3, {"status": "published"})

        change = await use_case.update_agent(3, {"title": "Renamed", "status": "published"})
        assert change.agent.title == "Renamed"
        assert change.agent.status == AgentStatus.DRAFT.value

    @pytest.mark.asyncio
    async def test_remote_delete_failure_keeps_local_agent(self, use_case, mock_agent_repository, mock_client, draft_agent):
        draft_agent.remote_id = "agent-remote-1"
        mock_agent_repository.get_by_id.return_value = draft_agent
        mock_client.delete_agent.side_effect = RAGFlowApiError("forbidden")

        with pytest.raises(RAGFlowApiError, match="Remote delete failed: forbidden"):
            await use_case.delete_agent(3)
        mock_agent_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stats_lists_every_status(self, use_case, mock_agent_repository):
        mock_agent_repository.count_by_status.return_value = {"draft": 2, "sync_failed": 1}

        stats = await use_case.get_stats()

        assert stats == {"total": 3, "by_status": {"draft": 2, "published": 0, "sync_failed": 1}}
