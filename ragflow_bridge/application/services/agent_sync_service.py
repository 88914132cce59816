"""Push local agents to RAGFlow"""

from typing import Any, Dict, List, Optional
import logging

from ...domain.entities.agent import Agent
from ...domain.exceptions import RAGFlowApiError
from ...domain.repositories.agent_repository import AgentRepository
from ...infrastructure.external.ragflow_client import RAGFlowClient

logger = logging.getLogger(__name__)


class AgentSyncService:
    """Creates, updates and deletes agents in RAGFlow and records the outcome locally.

    A failed push never raises: the agent is marked ``sync_failed`` with the
    error message and the result dict reports it.
    """

    def __init__(self, agent_repo: AgentRepository, client: RAGFlowClient):
        self.agent_repo = agent_repo
        self.client = client

    async def push(self, agent: Agent) -> Dict[str, Any]:
        """Create the agent in RAGFlow, or update it once it has a remote ID."""
        creating = agent.remote_id is None
        try:
            if creating:
                result = await self.client.create_agent(agent.title, agent.dsl, description=agent.description)
                remote = await self._find_remote(agent, result)
                if remote is None:
                    raise RAGFlowApiError(f"Created agent {agent.title} was not found in RAGFlow")
                agent.apply_remote(remote)
            else:
                await self.client.update_agent(
                    agent.remote_id,
                    {"title": agent.title, "description": agent.description, "dsl": agent.dsl}
                )
            agent.mark_synced()
        except Exception as e:
            logger.error(f"Sync agent {agent.id} ({agent.title}) failed: {e}")
            agent.mark_sync_failed(str(e))
            await self.agent_repo.update(agent)
            return {"success": False, "message": f"Agent sync failed: {e}", "error": str(e)}

        await self.agent_repo.update(agent)
        message = "Agent created in RAGFlow" if creating else "Agent updated in RAGFlow"
        logger.info(f"{message}: {agent.remote_id}")
        return {"success": True, "message": message, "data": agent.to_dict()}

    async def delete_remote(self, agent: Agent) -> None:
        """Delete the agent in RAGFlow; local-only agents need nothing."""
        if not agent.remote_id:
            return

        try:
            await self.client.delete_agent(agent.remote_id)
        except RAGFlowApiError as e:
            raise RAGFlowApiError(f"Remote delete failed: {e}", code=e.code, details=e.details) from e

    async def sync_all(self) -> Dict[str, Any]:
        """Push every agent that was never synced or whose last sync failed."""
        agents = await self.agent_repo.get_needing_sync()

        results: List[Dict[str, Any]] = []
        for agent in agents:
            outcome = await self.push(agent)
            results.append({
                "agent_id": agent.id,
                "title": agent.title,
                "success": outcome["success"],
                "message": outcome["message"],
            })

        success_count = sum(1 for result in results if result["success"])
        failure_count = len(results) - success_count
        logger.info(f"Agent sync completed: {success_count} successful, {failure_count} failed")

        return {
            "success": failure_count == 0,
            "message": f"Sync completed: {success_count} successful, {failure_count} failed",
            "data": {
                "total": len(results),
                "success_count": success_count,
                "failure_count": failure_count,
                "results": results,
            },
        }

    async def _find_remote(self, agent: Agent, result: Any) -> Optional[Dict[str, Any]]:
        # RAGFlow answers agent creation with ``true``; the new ID comes from a title lookup
        if isinstance(result, dict) and result.get("id"):
            return result

        matches = await self.client.list_agents(page=1, page_size=1, title=agent.title, orderby="create_time", desc=True)
        for remote in matches:
            if isinstance(remote, dict) and remote.get("id"):
                return remote
        return None
