from fastapi import APIRouter, Depends
from typing import Optional

from shared.models.base import DatasetCreateRequest, DatasetUpdateRequest
from ...application.services.di_container import DIContainer
from .dependencies import get_di_container
from .responses import build_pagination, error_response, success_response

router = APIRouter(tags=["datasets"])


@router.post("/datasets/create", summary="Create a dataset")
async def create_dataset(
    request: DatasetCreateRequest,
    container: DIContainer = Depends(get_di_container)
):
    """Create a dataset locally and in RAGFlow."""
    try:
        use_case = container.get_dataset_use_case()
        dataset = await use_case.create_dataset(
            name=request.name,
            description=request.description,
            chunk_method=request.chunk_method,
            embedding_model=request.embedding_model,
            language=request.language
        )
        return success_response("Dataset created successfully", dataset.to_dict(), status_code=201)
    except Exception as e:
        return error_response("Failed to create dataset", e)


@router.get("/datasets/list", summary="List datasets")
async def list_datasets(
    page: int = 1,
    limit: int = 20,
    name: Optional[str] = None,
    status: Optional[str] = None,
    container: DIContainer = Depends(get_di_container)
):
    """List local datasets."""
    try:
        use_case = container.get_dataset_use_case()
        result = await use_case.list_datasets(page=page, limit=limit, name=name, status=status)
        return success_response(
            "Datasets retrieved successfully",
            {
                "datasets": [dataset.to_dict() for dataset in result.datasets],
                "pagination": build_pagination(result.page, result.limit, result.total),
            }
        )
    except Exception as e:
        return error_response("Failed to retrieve datasets", e)


@router.api_route("/datasets/{dataset_id}", methods=["PUT", "PATCH"], summary="Update a dataset")
async def update_dataset(
    dataset_id: int,
    request: DatasetUpdateRequest,
    container: DIContainer = Depends(get_di_container)
):
    """Update a dataset."""
    try:
        use_case = container.get_dataset_use_case()
        dataset = await use_case.update_dataset(dataset_id, request.model_dump(exclude_unset=True))
        return success_response("Dataset updated successfully", dataset.to_dict())
    except Exception as e:
        return error_response("Failed to update dataset", e)


@router.delete("/datasets/{dataset_id}", summary="Delete a dataset")
async def delete_dataset(
    dataset_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Delete a dataset and its documents."""
    try:
        use_case = container.get_dataset_use_case()
        dataset = await use_case.delete_dataset(dataset_id)
        return success_response(f"Dataset {dataset.name} deleted successfully", {"id": dataset_id})
    except Exception as e:
        return error_response("Failed to delete dataset", e)


@router.get("/datasets/{remote_dataset_id}/knowledge-graph", summary="Get the knowledge graph of a dataset")
async def get_dataset_knowledge_graph(
    remote_dataset_id: str,
    container: DIContainer = Depends(get_di_container)
):
    """Get the knowledge graph of a RAGFlow dataset."""
    try:
        use_case = container.get_dataset_use_case()
        graph = await use_case.get_knowledge_graph(remote_dataset_id)
        return success_response("Knowledge graph retrieved successfully", graph)
    except Exception as e:
        return error_response("Failed to retrieve knowledge graph", e)
