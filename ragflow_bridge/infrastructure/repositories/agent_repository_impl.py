from typing import Dict, List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from ..database.models import AgentDB
from ...domain.entities.agent import Agent, AgentStatus
from ...domain.repositories.agent_repository import AgentRepository
import logging

logger = logging.getLogger(__name__)

_FIELDS = (
    "remote_id", "title", "description", "dsl", "status", "sync_error_message",
    "remote_create_time", "remote_update_time", "last_sync_time",
    "create_time", "update_time",
)


class SqlAlchemyAgentRepository(AgentRepository):
    """SQLAlchemy implementation of AgentRepository."""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def save(self, agent: Agent) -> Agent:
        """Save agent to database."""
        agent_db = AgentDB(**{name: getattr(agent, name) for name in _FIELDS})

        self.db.add(agent_db)
        self.db.commit()
        self.db.refresh(agent_db)

        agent.id = agent_db.id
        logger.info(f"Agent {agent.id} ({agent.title}) saved to database")
        return agent

    async def get_by_id(self, agent_id: int) -> Optional[Agent]:
        """Get agent by ID."""
        agent_db = self.db.query(AgentDB).filter(AgentDB.id == agent_id).first()
        return self._map_to_domain(agent_db) if agent_db else None

    async def list(
        self,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Agent], int]:
        """List agents with an optional status filter."""
        query = self.db.query(AgentDB)
        if status:
            query = query.filter(AgentDB.status == status)

        total = query.count()
        agents_db = (
            query.order_by(AgentDB.create_time.desc(), AgentDB.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

        return [self._map_to_domain(agent_db) for agent_db in agents_db], total

    async def get_needing_sync(self) -> List[Agent]:
        """Get agents without a remote ID or whose last sync failed."""
        agents_db = self.db.query(AgentDB).filter(
            or_(AgentDB.remote_id.is_(None), AgentDB.status == AgentStatus.SYNC_FAILED.value)
        ).order_by(AgentDB.id).all()
        return [self._map_to_domain(agent_db) for agent_db in agents_db]

    async def count_by_status(self) -> Dict[str, int]:
        """Count agents per status."""
        rows = self.db.query(AgentDB.status, func.count(AgentDB.id)).group_by(AgentDB.status).all()
        return {status: count for status, count in rows}

    async def update(self, agent: Agent) -> Agent:
        """Update agent in database."""
        agent_db = self.db.query(AgentDB).filter(AgentDB.id == agent.id).first()

        if not agent_db:
            raise ValueError(f"Agent {agent.id} not found")

        for name in _FIELDS:
            setattr(agent_db, name, getattr(agent, name))

        self.db.commit()
        self.db.refresh(agent_db)

        logger.info(f"Agent {agent.id} updated in database")
        return agent

    async def delete(self, agent_id: int) -> bool:
        """Delete agent by ID."""
        agent_db = self.db.query(AgentDB).filter(AgentDB.id == agent_id).first()

        if not agent_db:
            return False

        self.db.delete(agent_db)
        self.db.commit()

        logger.info(f"Agent {agent_id} deleted from database")
        return True

    def _map_to_domain(self, agent_db: AgentDB) -> Agent:
        agent = Agent(id=agent_db.id, **{name: getattr(agent_db, name) for name in _FIELDS})
        agent.dsl = agent_db.dsl or {}
        return agent
