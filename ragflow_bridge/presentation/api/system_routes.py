from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...application.services.di_container import DIContainer
from .dependencies import get_di_container

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health", summary="RAGFlow health check")
async def health_check(container: DIContainer = Depends(get_di_container)):
    """Check that RAGFlow answers."""
    report = await container.get_system_use_case().health()
    return JSONResponse(status_code=200 if report.healthy else 503, content=report.body)


@router.get("/status", summary="Service status")
async def system_status(container: DIContainer = Depends(get_di_container)):
    """Report service status and the state of RAGFlow."""
    report = await container.get_system_use_case().status()
    return JSONResponse(status_code=200 if report.healthy else 503, content=report.body)
