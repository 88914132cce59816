from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional

from shared.models.base import ConversationCreateRequest
from ...application.services.di_container import DIContainer
from .dependencies import get_di_container
from .responses import error_response, openai_error_response, success_response

router = APIRouter(tags=["conversations"])


@router.post("/conversations", summary="Create a chat assistant")
async def create_assistant(
    request: ConversationCreateRequest,
    container: DIContainer = Depends(get_di_container)
):
    """Create a chat assistant in RAGFlow."""
    try:
        use_case = container.get_conversation_use_case()
        assistant = await use_case.create_assistant(
            request.name, dataset_ids=request.dataset_ids, options=request.options
        )
        return success_response("Chat assistant created successfully", assistant.to_dict(), status_code=201)
    except Exception as e:
        return error_response("Failed to create chat assistant", e)


@router.get("/conversations", summary="List chat assistants")
async def list_assistants(
    page: int = 1,
    limit: int = 30,
    name: Optional[str] = None,
    container: DIContainer = Depends(get_di_container)
):
    """List chat assistants."""
    try:
        use_case = container.get_conversation_use_case()
        assistants = await use_case.list_assistants(page=page, limit=limit, name=name)
        return success_response(
            "Chat assistants retrieved successfully",
            [assistant.to_dict() for assistant in assistants]
        )
    except Exception as e:
        return error_response("Failed to retrieve chat assistants", e)


@router.api_route("/conversations/{chat_id}", methods=["PUT", "PATCH"], summary="Update a chat assistant")
async def update_assistant(
    chat_id: str,
    data: Optional[Dict[str, Any]] = Body(None),
    container: DIContainer = Depends(get_di_container)
):
    """Update a chat assistant."""
    try:
        use_case = container.get_conversation_use_case()
        result = await use_case.update_assistant(chat_id, data)
        return success_response("Chat assistant updated successfully", result)
    except Exception as e:
        return error_response("Failed to update chat assistant", e)


@router.delete("/conversations/{chat_id}", summary="Delete a chat assistant")
async def delete_assistant(
    chat_id: str,
    container: DIContainer = Depends(get_di_container)
):
    """Delete a chat assistant."""
    try:
        use_case = container.get_conversation_use_case()
        await use_case.delete_assistant(chat_id)
        return success_response("Chat assistant deleted successfully", {"id": chat_id})
    except Exception as e:
        return error_response("Failed to delete chat assistant", e)


@router.post("/conversations/{chat_id}/sessions", summary="Create a chat session")
async def create_session(
    chat_id: str,
    data: Optional[Dict[str, Any]] = Body(None),
    container: DIContainer = Depends(get_di_container)
):
    """Open a session with a chat assistant."""
    try:
        options = dict(data or {})
        name = options.pop("name", None)

        use_case = container.get_conversation_use_case()
        conversation = await use_case.create_session(chat_id, name=name, **options)
        return success_response("Session created successfully", conversation.to_dict(), status_code=201)
    except Exception as e:
        return error_response("Failed to create session", e)


@router.get("/conversations/{chat_id}/history", summary="Get chat history")
async def get_history(
    chat_id: str,
    page: int = 1,
    limit: int = 30,
    session_id: Optional[str] = None,
    container: DIContainer = Depends(get_di_container)
):
    """Get the sessions and messages of a chat assistant."""
    try:
        use_case = container.get_conversation_use_case()
        history = await use_case.get_history(chat_id, page=page, limit=limit, session_id=session_id)
        return success_response("Chat history retrieved successfully", history)
    except Exception as e:
        return error_response("Failed to retrieve chat history", e)


@router.post("/chat/{chat_id}/messages", summary="Send a chat message")
async def send_message(
    chat_id: str,
    data: Optional[Dict[str, Any]] = Body(None),
    container: DIContainer = Depends(get_di_container)
):
    """Ask a chat assistant a question."""
    try:
        use_case = container.get_conversation_use_case()
        result = await use_case.send_message(chat_id, data)
        return success_response("Message sent successfully", result)
    except Exception as e:
        return error_response("Failed to send message", e)


@router.post("/chat/{chat_id}/completions", summary="Complete a chat transcript")
async def complete_chat(
    chat_id: str,
    data: Optional[Dict[str, Any]] = Body(None),
    container: DIContainer = Depends(get_di_container)
):
    """Answer the latest user message of ``messages``."""
    try:
        use_case = container.get_conversation_use_case()
        result = await use_case.complete_chat(chat_id, data)
        return success_response("Chat completion successful", result)
    except Exception as e:
        return error_response("Chat completion failed", e)


@router.post("/chat/openai/{chat_id}/completions", summary="OpenAI compatible chat completion")
async def openai_completion(
    chat_id: str,
    data: Optional[Dict[str, Any]] = Body(None),
    container: DIContainer = Depends(get_di_container)
):
    """Relay an OpenAI chat completion request; the answer is not wrapped."""
    try:
        use_case = container.get_conversation_use_case()
        return JSONResponse(content=await use_case.openai_completion(chat_id, data))
    except Exception as e:
        return openai_error_response(e)
