from fastapi import APIRouter, Depends
from typing import Optional

from shared.models.base import EntitySearchRequest
from ...application.services.di_container import DIContainer
from ...application.use_cases.knowledge_graph_use_cases import DEFAULT_MAX_RELATIONS, DEFAULT_RELATION_DEPTH
from .dependencies import get_di_container
from .responses import error_response, success_response

router = APIRouter(prefix="/knowledge-graph", tags=["knowledge-graph"])


@router.get("/datasets/{dataset_id}", summary="Get the knowledge graph of a dataset")
async def get_knowledge_graph(
    dataset_id: str,
    depth: Optional[int] = None,
    limit: Optional[int] = None,
    entity_types: Optional[str] = None,
    relation_types: Optional[str] = None,
    container: DIContainer = Depends(get_di_container)
):
    """Get the knowledge graph together with the requested filters."""
    try:
        use_case = container.get_knowledge_graph_use_case()
        result = await use_case.get_graph(dataset_id, {
            "depth": depth,
            "limit": limit,
            "entity_types": entity_types,
            "relation_types": relation_types,
        })
        return success_response(
            "Knowledge graph retrieved successfully",
            result["graph"],
            filters=result["filters"],
            dataset_id=dataset_id
        )
    except Exception as e:
        return error_response("Failed to retrieve knowledge graph", e)


@router.post("/datasets/{dataset_id}/entities/search", summary="Search entities")
async def search_entities(
    dataset_id: str,
    request: EntitySearchRequest,
    container: DIContainer = Depends(get_di_container)
):
    """Search entities of the knowledge graph by name and type."""
    try:
        use_case = container.get_knowledge_graph_use_case()
        result = await use_case.search_entities(dataset_id, request.model_dump())
        return success_response("Entities found", result, dataset_id=dataset_id)
    except Exception as e:
        return error_response("Failed to search entities", e)


@router.get("/datasets/{dataset_id}/entities/{entity_id}/relations", summary="Get entity relations")
async def get_entity_relations(
    dataset_id: str,
    entity_id: str,
    depth: int = DEFAULT_RELATION_DEPTH,
    max_relations: int = DEFAULT_MAX_RELATIONS,
    container: DIContainer = Depends(get_di_container)
):
    """Get the relations of one entity."""
    try:
        use_case = container.get_knowledge_graph_use_case()
        result = await use_case.get_entity_relations(dataset_id, entity_id, depth=depth, max_relations=max_relations)
        return success_response("Entity relations retrieved successfully", result, dataset_id=dataset_id)
    except Exception as e:
        return error_response("Failed to retrieve entity relations", e)


@router.get("/datasets/{dataset_id}/stats", summary="Get knowledge graph statistics")
async def get_knowledge_graph_stats(
    dataset_id: str,
    container: DIContainer = Depends(get_di_container)
):
    """Count entities and relations of the knowledge graph."""
    try:
        use_case = container.get_knowledge_graph_use_case()
        stats = await use_case.get_stats(dataset_id)
        return success_response("Knowledge graph statistics retrieved successfully", stats, dataset_id=dataset_id)
    except Exception as e:
        return error_response("Failed to retrieve knowledge graph statistics", e)
