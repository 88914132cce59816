from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple
from ..entities.agent import Agent


class AgentRepository(ABC):
    """Abstract repository for agent persistence."""

    @abstractmethod
    async def save(self, agent: Agent) -> Agent:
        """Save a new agent and assign its local ID."""
        pass

    @abstractmethod
    async def get_by_id(self, agent_id: int) -> Optional[Agent]:
        """Get agent by local ID."""
        pass

    @abstractmethod
    async def list(
        self,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Agent], int]:
        """List agents newest first, with the total count."""
        pass

    @abstractmethod
    async def get_needing_sync(self) -> List[Agent]:
        """Get agents never pushed to RAGFlow or whose last push failed."""
        pass

    @abstractmethod
    async def count_by_status(self) -> Dict[str, int]:
        """Count agents per status."""
        pass

    @abstractmethod
    async def update(self, agent: Agent) -> Agent:
        """Update agent in repository."""
        pass

    @abstractmethod
    async def delete(self, agent_id: int) -> bool:
        """Delete agent by local ID."""
        pass
