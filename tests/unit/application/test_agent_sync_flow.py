"""Agent create, failed sync and batch sync, wired through the real container"""

import json
import httpx
import pytest

from shared.config.settings import Settings
from ragflow_bridge.application.services.di_container import DIContainer
from ragflow_bridge.domain.entities.agent import AgentStatus
from ragflow_bridge.infrastructure.external.ragflow_client import RAGFlowClient


@pytest.fixture
def ragflow_agents():
    """RAGFlow that rejects agents titled "Broken" and answers creation with ``true``"""
    created = []

    def handler(request):
        if request.method == "POST" and request.url.path.endswith("/agents"):
            body = json.loads(request.read())
            if body["title"] == "Broken":
                return httpx.Response(200, json={"code": 102, "message": "Invalid DSL"})
            created.append(body["title"])
            return httpx.Response(200, json={"code": 0, "data": True})
        if request.method == "GET" and request.url.path.endswith("/agents"):
            title = request.url.params.get("title")
            return httpx.Response(200, json={"code": 0, "data": [{"id": f"agent-{title.lower()}", "title": title}]})
        return httpx.Response(200, json={"code": 0, "data": True})

    return handler, created


@pytest.fixture
def container(db_session, ragflow_instance, ragflow_agents):
    handler, _ = ragflow_agents
    client = RAGFlowClient(ragflow_instance, http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    return DIContainer(db_session, client, Settings())


class TestAgentSyncFlow:
    """Test agents move from draft to published or sync_failed"""

    @pytest.mark.asyncio
    async def test_batch_sync_publishes_drafts_and_keeps_failures(self, container, ragflow_agents):
        _, created = ragflow_agents
        use_case = container.get_agent_use_case()
        await use_case.create_agent("Triage", dsl={"components": {}})
        broken = await use_case.create_agent("Broken", auto_sync=True)

        assert broken.sync["success"] is False
        assert (await use_case.get_stats())["by_status"] == {"draft": 1, "published": 0, "sync_failed": 1}

        result = await use_case.batch_sync()

        assert result["message"] == "Sync completed: 1 successful, 1 failed"
        assert created == ["Triage"]
        agents = (await use_case.list_agents()).agents
        by_title = {agent.title: agent for agent in agents}
        assert by_title["Triage"].remote_id == "agent-triage"
        assert by_title["Triage"].status == AgentStatus.PUBLISHED.value
        assert by_title["Broken"].sync_error_message == "Invalid DSL (code 102)"

    @pytest.mark.asyncio
    async def test_delete_published_agent(self, container):
        use_case = container.get_agent_use_case()
        change = await use_case.create_agent("Triage", auto_sync=True)

        await use_case.delete_agent(change.agent.id)

        assert (await use_case.get_stats())["total"] == 0
