from fastapi import APIRouter, Depends, File, UploadFile
from typing import List, Optional

from shared.models.base import BatchDeleteRequest
from ...application.services.di_container import DIContainer
from ...application.services.document_upload_service import IncomingFile
from .dependencies import get_di_container
from .responses import build_pagination, error_response, failure_response, success_response

router = APIRouter(tags=["dataset-documents"])


@router.get("/datasets/{dataset_id}/documents", summary="List documents of a dataset")
async def list_documents(
    dataset_id: int,
    page: int = 1,
    limit: int = 20,
    name: Optional[str] = None,
    status: Optional[str] = None,
    type: Optional[str] = None,
    container: DIContainer = Depends(get_di_container)
):
    """List documents of a dataset."""
    try:
        use_case = container.get_dataset_document_use_case()
        result = await use_case.list_documents(
            dataset_id, page=page, limit=limit, name=name, status=status, type=type
        )
        return success_response(
            "Documents retrieved successfully",
            {
                "documents": [document.to_dict() for document in result.documents],
                "dataset": result.dataset.to_summary(),
                "pagination": build_pagination(result.page, result.limit, result.total),
            }
        )
    except Exception as e:
        return error_response("Failed to retrieve documents", e)


@router.post("/datasets/{dataset_id}/documents/upload", summary="Upload documents into a dataset")
async def upload_documents(
    dataset_id: int,
    files: Optional[List[UploadFile]] = File(None, description="Files to upload"),
    container: DIContainer = Depends(get_di_container)
):
    """Upload documents and sync them to RAGFlow."""
    try:
        incoming = []
        for upload in files or []:
            content = await upload.read()
            incoming.append(IncomingFile(filename=upload.filename, content=content, mime_type=upload.content_type))

        use_case = container.get_dataset_document_use_case()
        result = await use_case.upload_documents(dataset_id, incoming)
        return success_response(
            f"Uploaded {result['uploaded_count']} documents",
            {
                "uploaded": result["uploaded"],
                "errors": result["errors"],
                "dataset": result["dataset"],
            },
            status_code=201
        )
    except Exception as e:
        return error_response("Failed to upload documents", e)


@router.get("/datasets/{dataset_id}/documents/stats", summary="Document statistics of a dataset")
async def get_document_stats(
    dataset_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Get document statistics of a dataset."""
    try:
        use_case = container.get_dataset_document_use_case()
        stats = await use_case.get_stats(dataset_id)
        return success_response("Statistics retrieved successfully", stats.to_dict())
    except Exception as e:
        return error_response("Failed to retrieve statistics", e)


@router.api_route(
    "/datasets/{dataset_id}/documents/batch-delete",
    methods=["DELETE", "POST"],
    summary="Delete several documents"
)
async def batch_delete_documents(
    dataset_id: int,
    request: BatchDeleteRequest,
    container: DIContainer = Depends(get_di_container)
):
    """Delete several documents of a dataset."""
    try:
        use_case = container.get_dataset_document_use_case()
        result = await use_case.batch_delete(dataset_id, request.document_ids)
        return success_response(f"Deleted {result['deleted_count']} documents", result)
    except Exception as e:
        return error_response("Failed to delete documents", e)


@router.post("/datasets/{dataset_id}/documents/retry-failed", summary="Retry all failed documents")
async def retry_failed_documents(
    dataset_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Re-upload every failed document of a dataset."""
    try:
        use_case = container.get_dataset_document_use_case()
        result = await use_case.retry_failed(dataset_id)
        return success_response(f"Retried {result['retried_count']} documents", result)
    except Exception as e:
        return error_response("Failed to retry documents", e)


@router.post("/datasets/{dataset_id}/documents/sync-all-chunks", summary="Sync chunks of all parsed documents")
async def sync_all_chunks(
    dataset_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Mirror the chunks of every parsed document of a dataset."""
    try:
        use_case = container.get_dataset_document_use_case()
        result = await use_case.sync_all_chunks(dataset_id)
        return success_response(f"Synced chunks of {result['synced_count']} documents", result)
    except Exception as e:
        return error_response("Failed to sync chunks", e)


@router.post("/datasets/{dataset_id}/documents/{document_id}/sync-chunks", summary="Sync chunks of a document")
async def sync_chunks(
    dataset_id: int,
    document_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Mirror the chunks RAGFlow produced for one document."""
    try:
        use_case = container.get_dataset_document_use_case()
        result = await use_case.sync_chunks(dataset_id, document_id)
        if not result["success"]:
            return failure_response("Failed to sync chunks", result.get("error"), status_code=500)
        return success_response(f"Synced {result['synced_count']} chunks", result)
    except Exception as e:
        return error_response("Failed to sync chunks", e)


@router.get("/datasets/{dataset_id}/documents/{document_id}/chunks", summary="List mirrored chunks of a document")
async def list_chunks(
    dataset_id: int,
    document_id: int,
    page: int = 1,
    limit: int = 50,
    container: DIContainer = Depends(get_di_container)
):
    """List the locally mirrored chunks of a document."""
    try:
        use_case = container.get_dataset_document_use_case()
        result = await use_case.list_chunks(dataset_id, document_id, page=page, limit=limit)
        return success_response(
            "Chunks retrieved successfully",
            {
                "chunks": [chunk.to_dict() for chunk in result.chunks],
                "document": {"id": result.document.id, "name": result.document.name, "remoteId": result.document.remote_id},
                "pagination": build_pagination(result.page, result.limit, result.total),
            }
        )
    except Exception as e:
        return error_response("Failed to retrieve chunks", e)


@router.delete("/datasets/{dataset_id}/documents/{document_id}", summary="Delete a document")
async def delete_document(
    dataset_id: int,
    document_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Delete one document of a dataset."""
    try:
        use_case = container.get_dataset_document_use_case()
        document = await use_case.delete_document(dataset_id, document_id)
        return success_response(f"Document {document.name} deleted successfully", {"id": document_id})
    except Exception as e:
        return error_response("Failed to delete document", e)


@router.post("/datasets/{dataset_id}/documents/{document_id}/parse", summary="Start parsing a document")
async def parse_document(
    dataset_id: int,
    document_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Start parsing a document in RAGFlow."""
    try:
        use_case = container.get_dataset_document_use_case()
        result = await use_case.parse_document(dataset_id, document_id)
        if not result["success"]:
            return failure_response(result["message"], result.get("error"), status_code=500)
        return success_response(result["message"], result.get("data"), status_code=202)
    except Exception as e:
        return error_response("Failed to start parsing", e)


@router.post("/datasets/{dataset_id}/documents/{document_id}/stop-parsing", summary="Stop parsing a document")
async def stop_parsing(
    dataset_id: int,
    document_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Stop parsing a document in RAGFlow."""
    try:
        use_case = container.get_dataset_document_use_case()
        result = await use_case.stop_parsing(dataset_id, document_id)
        if not result["success"]:
            return failure_response(result["message"], result.get("error"), status_code=500)
        return success_response(result["message"], result.get("data"))
    except Exception as e:
        return error_response("Failed to stop parsing", e)


@router.get("/datasets/{dataset_id}/documents/{document_id}/parse-status", summary="Get the parse status")
async def get_parse_status(
    dataset_id: int,
    document_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Get the parse status of a document."""
    try:
        use_case = container.get_dataset_document_use_case()
        status = await use_case.get_parse_status(dataset_id, document_id)
        return success_response("Parse status retrieved successfully", status)
    except Exception as e:
        return error_response("Failed to retrieve parse status", e)


@router.post("/datasets/{dataset_id}/documents/{document_id}/retry", summary="Retry a failed document")
async def retry_document(
    dataset_id: int,
    document_id: int,
    container: DIContainer = Depends(get_di_container)
):
    """Re-upload one failed document."""
    try:
        use_case = container.get_dataset_document_use_case()
        result = await use_case.retry_document(dataset_id, document_id)
        if not result["success"]:
            return failure_response("Failed to retry document", result["message"], status_code=500)
        return success_response(result["message"], result)
    except Exception as e:
        return error_response("Failed to retry document", e)
