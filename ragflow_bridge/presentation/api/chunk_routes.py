from fastapi import APIRouter, Body, Depends
from typing import Any, Dict, Optional

from ...application.services.di_container import DIContainer
from .dependencies import get_di_container
from .responses import error_response, success_response

router = APIRouter(tags=["chunks"])


@router.post("/datasets/{remote_dataset_id}/chunks/retrieve", summary="Retrieve relevant chunks")
async def retrieve_chunks(
    remote_dataset_id: str,
    data: Optional[Dict[str, Any]] = Body(None),
    container: DIContainer = Depends(get_di_container)
):
    """Retrieve chunks of a RAGFlow dataset relevant to a query."""
    try:
        use_case = container.get_chunk_use_case()
        chunks = await use_case.retrieve(remote_dataset_id, data)
        return success_response("Chunks retrieved successfully", [chunk.to_dict() for chunk in chunks])
    except Exception as e:
        return error_response("Failed to retrieve chunks", e)


@router.post("/datasets/{remote_dataset_id}/chunks", summary="Add chunks")
async def add_chunks(
    remote_dataset_id: str,
    data: Optional[Dict[str, Any]] = Body(None),
    container: DIContainer = Depends(get_di_container)
):
    """Add chunks to documents of a RAGFlow dataset."""
    try:
        use_case = container.get_chunk_use_case()
        result = await use_case.add_chunks(remote_dataset_id, (data or {}).get("chunks"))
        return success_response("Chunks added successfully", result, status_code=201)
    except Exception as e:
        return error_response("Failed to add chunks", e)


@router.put("/datasets/{remote_dataset_id}/chunks/{chunk_id}", summary="Update a chunk")
async def update_chunk(
    remote_dataset_id: str,
    chunk_id: str,
    data: Optional[Dict[str, Any]] = Body(None),
    container: DIContainer = Depends(get_di_container)
):
    """Update one chunk; the body names its ``document_id``."""
    try:
        use_case = container.get_chunk_use_case()
        result = await use_case.update_chunk(remote_dataset_id, chunk_id, data)
        return success_response("Chunk updated successfully", result)
    except Exception as e:
        return error_response("Failed to update chunk", e)


@router.delete("/datasets/{remote_dataset_id}/chunks/{chunk_id}", summary="Delete a chunk")
async def delete_chunk(
    remote_dataset_id: str,
    chunk_id: str,
    document_id: Optional[str] = None,
    container: DIContainer = Depends(get_di_container)
):
    """Delete one chunk of a document."""
    try:
        use_case = container.get_chunk_use_case()
        await use_case.delete_chunk(remote_dataset_id, chunk_id, document_id)
        return success_response("Chunk deleted successfully", {"id": chunk_id})
    except Exception as e:
        return error_response("Failed to delete chunk", e)
