from fastapi import APIRouter, Body, Depends
from typing import Any, Dict, Optional

from shared.models.base import AgentCreateRequest
from ...application.services.di_container import DIContainer
from .dependencies import get_di_container
from .responses import build_pagination, error_response, failure_response, success_response

router = APIRouter(tags=["agents"])


@router.post("/agents", summary="Create an agent")
async def create_agent(
    request: AgentCreateRequest,
    container: DIContainer = Depends(get_di_container)
):
    """Create an agent, pushing it to RAGFlow when ``auto_sync`` is set."""
    try:
        use_case = container.get_agent_use_case()
        change = await use_case.create_agent(
            request.title, description=request.description, dsl=request.dsl, auto_sync=request.auto_sync
        )
        return success_response("Agent created successfully", change.to_dict(), status_code=201)
    except Exception as e:
        return error_response("Failed to create agent", e)


@router.get("/agents", summary="List agents")
async def list_agents(
    page: int = 1,
    limit: int = 20,
    status: Optional[str] = None,
    container: DIContainer = Depends(get_di_container)
):
    """List agents newest first."""
    try:
        use_case = container.get_agent_use_case()
        result = await use_case.list_agents(page=page, limit=limit, status=status)
        return success_response(
            "Agents retrieved successfully",
            {
                "agents": [agent.to_dict() for agent in result.agents],
                "pagination": build_pagination(result.page, result.limit, result.total),
            }
        )
    except Exception as e:
        return error_response("Failed to retrieve agents", e)


@router.get("/agents/stats", summary="Agent statistics")
async def get_agent_stats(container: DIContainer = Depends(get_di_container)):
    """Count agents per status."""
    try:
        use_case = container.get_agent_use_case()
        return success_response("Statistics retrieved successfully", await use_case.get_stats())
    except Exception as e:
        return error_response("Failed to retrieve statistics", e)


@router.post("/agents/batch-sync", summary="Sync all pending agents")
async def batch_sync_agents(container: DIContainer = Depends(get_di_container)):
    """Push every agent that was never synced or whose last sync failed."""
    try:
        use_case = container.get_agent_use_case()
        result = await use_case.batch_sync()
        return success_response(result["message"], result["data"])
    except Exception as e:
        return error_response("Failed to sync agents", e)


@router.get("/agents/{agent_id}", summary="Get an agent")
async def get_agent(
    agent_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Get an agent with its DSL."""
    try:
        use_case = container.get_agent_use_case()
        agent = await use_case.get_agent(agent_id)
        return success_response("Agent retrieved successfully", agent.to_dict(include_dsl=True))
    except Exception as e:
        return error_response("Failed to retrieve agent", e)


@router.api_route("/agents/{agent_id}", methods=["PUT", "PATCH"], summary="Update an agent")
async def update_agent(
    agent_id: int,
    data: Optional[Dict[str, Any]] = Body(None),
    container: DIContainer = Depends(get_di_container)
):
    """Update title, description or DSL of an agent."""
    try:
        changes = dict(data or {})
        auto_sync = bool(changes.pop("auto_sync", False))

        use_case = container.get_agent_use_case()
        change = await use_case.update_agent(agent_id, changes, auto_sync=auto_sync)
        return success_response("Agent updated successfully", change.to_dict())
    except Exception as e:
        return error_response("Failed to update agent", e)


@router.delete("/agents/{agent_id}", summary="Delete an agent")
async def delete_agent(
    agent_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Delete an agent in RAGFlow and locally."""
    try:
        use_case = container.get_agent_use_case()
        agent = await use_case.delete_agent(agent_id)
        return success_response(f"Agent {agent.title} deleted successfully", {"id": agent_id})
    except Exception as e:
        return error_response("Failed to delete agent", e)


@router.post("/agents/{agent_id}/sync", summary="Sync an agent to RAGFlow")
async def sync_agent(
    agent_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Create or update the agent in RAGFlow."""
    try:
        use_case = container.get_agent_use_case()
        result = await use_case.sync_agent(agent_id)
        if not result["success"]:
            return failure_response(result["message"], result.get("error"), status_code=500)
        return success_response(result["message"], result.get("data"))
    except Exception as e:
        return error_response("Failed to sync agent", e)
