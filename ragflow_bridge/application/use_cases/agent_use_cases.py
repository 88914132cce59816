"""Agent use case"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from ...domain.entities.agent import Agent, AgentStatus, TITLE_MAX_LENGTH
from ...domain.exceptions import ResourceNotFoundError
from ...domain.repositories.agent_repository import AgentRepository
from ..services.agent_sync_service import AgentSyncService

logger = logging.getLogger(__name__)


@dataclass
class AgentPage:
    """One page of agents"""
    agents: List[Agent]
    page: int
    limit: int
    total: int


@dataclass
class AgentChange:
    """A created or updated agent with the outcome of its optional sync"""
    agent: Agent
    sync: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.agent.to_dict(include_dsl=True)
        if self.sync is not None:
            data["sync"] = {key: value for key, value in self.sync.items() if key != "data"}
        return data


def validate_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValueError("Agent title is required")

    title = title.strip()
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError(f"Agent title must not exceed {TITLE_MAX_LENGTH} characters")
    return title


def normalize_dsl(dsl: Any) -> Dict[str, Any]:
    return dict(dsl) if isinstance(dsl, dict) else {}


class AgentUseCase:
    """Use case for agents defined locally and published to RAGFlow"""

    def __init__(self, agent_repository: AgentRepository, sync_service: AgentSyncService):
        self.agent_repository = agent_repository
        self.sync_service = sync_service

    async def create_agent(
        self,
        title: Any,
        description: Optional[str] = None,
        dsl: Any = None,
        auto_sync: bool = False
    ) -> AgentChange:
        """Create a draft agent, pushing it to RAGFlow when ``auto_sync`` is set"""
        agent = Agent(title=validate_title(title), description=description, dsl=normalize_dsl(dsl))
        agent = await self.agent_repository.save(agent)
        logger.info(f"Agent {agent.id} ({agent.title}) created")

        sync = await self.sync_service.push(agent) if auto_sync else None
        return AgentChange(agent=agent, sync=sync)

    async def list_agents(self, page: int = 1, limit: int = 20, status: Optional[str] = None) -> AgentPage:
        """List agents newest first"""
        if status and status not in AgentStatus.get_values():
            raise ValueError(f"Invalid status: {status}")

        page = max(page, 1)
        limit = max(limit, 1)
        agents, total = await self.agent_repository.list(
            status=status or None, skip=(page - 1) * limit, limit=limit
        )
        return AgentPage(agents=agents, page=page, limit=limit, total=total)

    async def get_agent(self, agent_id: int) -> Agent:
        agent = await self.agent_repository.get_by_id(agent_id)
        if agent is None:
            raise ResourceNotFoundError(f"Agent {agent_id} not found")
        return agent

    async def update_agent(
        self,
        agent_id: int,
        changes: Optional[Dict[str, Any]],
        auto_sync: bool = False
    ) -> AgentChange:
        """Apply title, description and dsl changes"""
        agent = await self.get_agent(agent_id)

        changes = {key: value for key, value in (changes or {}).items() if key in ("title", "description", "dsl")}
        if not changes:
            raise ValueError("Update data is required")

        if "title" in changes:
            agent.title = validate_title(changes["title"])
        if "description" in changes:
            agent.description = changes["description"]
        if "dsl" in changes:
            agent.dsl = normalize_dsl(changes["dsl"])
        agent.update_time = datetime.utcnow()

        agent = await self.agent_repository.update(agent)
        sync = await self.sync_service.push(agent) if auto_sync else None
        return AgentChange(agent=agent, sync=sync)

    async def delete_agent(self, agent_id: int) -> Agent:
        """Delete the agent in RAGFlow first; the local record stays if that fails"""
        agent = await self.get_agent(agent_id)

        await self.sync_service.delete_remote(agent)
        await self.agent_repository.delete(agent.id)

        logger.info(f"Agent {agent_id} deleted")
        return agent

    async def sync_agent(self, agent_id: int) -> Dict[str, Any]:
        agent = await self.get_agent(agent_id)
        return await self.sync_service.push(agent)

    async def batch_sync(self) -> Dict[str, Any]:
        return await self.sync_service.sync_all()

    async def get_stats(self) -> Dict[str, Any]:
        """Count agents per status, listing every status"""
        counts = await self.agent_repository.count_by_status()
        by_status = {status: counts.get(status, 0) for status in AgentStatus.get_values()}
        return {"total": sum(counts.values()), "by_status": by_status}
