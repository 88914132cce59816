"""System health use case"""

from dataclasses import dataclass, field
from typing import Any, Dict
import logging

from ...infrastructure.external.ragflow_client import RAGFlowClient
from shared.models.base import utc_timestamp

logger = logging.getLogger(__name__)


@dataclass
class SystemReport:
    """Outcome of a RAGFlow availability check"""
    healthy: bool
    body: Dict[str, Any] = field(default_factory=dict)


class SystemUseCase:
    """Use case for health and status reporting"""

    def __init__(self, client: RAGFlowClient, version: str = "1.0.0"):
        self.client = client
        self.version = version

    async def health(self) -> SystemReport:
        """Check that RAGFlow answers."""
        data, error = await self._ping()
        if error is not None:
            return SystemReport(healthy=False, body={
                "status": "error",
                "message": "RAGFlow service is unavailable",
                "error": error,
                "timestamp": utc_timestamp(),
            })

        return SystemReport(healthy=True, body={
            "status": "ok",
            "message": "RAGFlow service is healthy",
            "data": data,
            "timestamp": utc_timestamp(),
        })

    async def status(self) -> SystemReport:
        """Report overall service status."""
        data, error = await self._ping()
        if error is not None:
            return SystemReport(healthy=False, body={
                "status": "degraded",
                "message": "Some services are experiencing issues",
                "services": {"ragflow": {"status": "unhealthy", "error": error}},
                "version": self.version,
                "timestamp": utc_timestamp(),
            })

        return SystemReport(healthy=True, body={
            "status": "running",
            "message": "System is operational",
            "services": {"ragflow": {"status": "healthy", "data": data}},
            "version": self.version,
            "timestamp": utc_timestamp(),
        })

    async def _ping(self):
        try:
            return await self.client.health_check(), None
        except Exception as e:
            logger.error(f"RAGFlow health check failed: {e}")
            return None, str(e)
