from fastapi import Depends, Request
from sqlalchemy.orm import Session

from shared.config.settings import settings
from shared.utils.database import get_db
from ...application.services.di_container import DIContainer
from ...infrastructure.external.ragflow_client import RAGFlowClient, create_ragflow_client


def get_ragflow_client(request: Request) -> RAGFlowClient:
    """Get the RAGFlow client shared by the application."""
    client = getattr(request.app.state, "ragflow_client", None)
    if client is None:
        client = create_ragflow_client(settings.ragflow_instance())
        request.app.state.ragflow_client = client
    return client


def get_di_container(
    db: Session = Depends(get_db),
    client: RAGFlowClient = Depends(get_ragflow_client)
) -> DIContainer:
    """Get dependency injection container."""
    return DIContainer(db, client, settings)
