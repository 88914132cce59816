"""Chat assistant and conversation use case"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from ...domain.entities.chat import ChatAssistant, Conversation
from ...domain.exceptions import InvalidCompletionRequest
from ...domain.repositories.chat_repository import ChatAssistantRepository, ConversationRepository
from ...domain.repositories.dataset_repository import DatasetRepository
from ...infrastructure.external.ragflow_client import RAGFlowClient

logger = logging.getLogger(__name__)


def latest_user_message(messages: List[Any]) -> Optional[str]:
    for message in reversed(messages):
        if isinstance(message, dict) and message.get("role") == "user":
            content = message.get("content")
            if isinstance(content, str) and content.strip():
                return content
    return None


class ConversationUseCase:
    """Use case for RAGFlow chat assistants, sessions and messages"""

    def __init__(
        self,
        client: RAGFlowClient,
        assistant_repository: ChatAssistantRepository,
        conversation_repository: ConversationRepository,
        dataset_repository: DatasetRepository
    ):
        self.client = client
        self.assistant_repository = assistant_repository
        self.conversation_repository = conversation_repository
        self.dataset_repository = dataset_repository

    async def create_assistant(
        self,
        name: Optional[str],
        dataset_ids: Optional[List[str]] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> ChatAssistant:
        """Create a chat assistant in RAGFlow and mirror it locally"""
        if not name or not str(name).strip():
            raise ValueError("Chat assistant name is required")

        remote = await self.client.create_chat(name=str(name).strip(), dataset_ids=dataset_ids, **(options or {}))
        assistant = await self._mirror(remote)

        logger.info(f"Chat assistant {assistant.remote_id} created")
        return assistant

    async def list_assistants(
        self,
        page: int = 1,
        limit: int = 30,
        name: Optional[str] = None
    ) -> List[ChatAssistant]:
        """List chat assistants from RAGFlow, refreshing local mirrors"""
        remote_chats = await self.client.list_chats(page=max(page, 1), page_size=max(limit, 1), name=name or None)

        assistants = []
        for remote in remote_chats:
            if isinstance(remote, dict) and remote.get("id"):
                assistants.append(await self._mirror(remote))
        return assistants

    async def update_assistant(self, chat_id: str, changes: Optional[Dict[str, Any]]) -> Any:
        """Update a chat assistant in RAGFlow"""
        if not changes:
            raise ValueError("Update data is required")

        result = await self.client.update_chat(chat_id, changes)

        assistant = await self.assistant_repository.get_by_remote_id(chat_id)
        if assistant is not None:
            if changes.get("name"):
                assistant.name = changes["name"]
            if "description" in changes:
                assistant.description = changes["description"]
            assistant.last_sync_time = datetime.utcnow()
            await self.assistant_repository.upsert(assistant)

        return result

    async def delete_assistant(self, chat_id: str) -> None:
        """Delete a chat assistant in RAGFlow and its local mirror"""
        await self.client.delete_chats([chat_id])
        await self.assistant_repository.delete_by_remote_id(chat_id)
        logger.info(f"Chat assistant {chat_id} deleted")

    async def create_session(self, chat_id: str, name: Optional[str] = None, **options: Any) -> Conversation:
        """Open a new session with a chat assistant"""
        remote = await self.client.create_session(chat_id, name=name or "New session", **options)

        assistant = await self.assistant_repository.get_by_remote_id(chat_id)
        conversation = Conversation.from_api(remote, assistant.id if assistant else None)
        return await self.conversation_repository.upsert(conversation)

    async def get_history(
        self,
        chat_id: str,
        page: int = 1,
        limit: int = 30,
        session_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """List the sessions of a chat assistant with their messages"""
        return await self.client.list_sessions(
            chat_id, page=max(page, 1), page_size=max(limit, 1), id=session_id or None
        )

    async def send_message(self, chat_id: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Ask a chat assistant a question"""
        data = dict(data or {})
        question = data.pop("question", None)
        if not question or not str(question).strip():
            raise ValueError("Question is required")

        result = await self.client.send_message(chat_id, question, **data)

        session_id = data.get("session_id") or (result or {}).get("session_id")
        if session_id:
            await self._record_exchange(session_id, question, result)

        return result

    async def complete_chat(self, chat_id: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Answer the latest user message of a chat transcript"""
        options = dict(data or {})
        messages = options.pop("messages", None)
        if not isinstance(messages, list) or not messages:
            raise ValueError("Messages array is required")

        question = latest_user_message(messages)
        if not question:
            raise ValueError("Messages must contain a user message")

        return await self.send_message(chat_id, {"question": question, **options})

    async def openai_completion(self, chat_id: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Relay an OpenAI style completion request and return RAGFlow's raw answer"""
        options = dict(data or {})
        model = options.pop("model", None)
        messages = options.pop("messages", None)
        stream = options.pop("stream", False)

        if not isinstance(model, str) or not model.strip():
            raise InvalidCompletionRequest("model is required", param="model")
        if not isinstance(messages, list) or not messages:
            raise InvalidCompletionRequest("messages must be a non-empty array", param="messages")
        for message in messages:
            if not isinstance(message, dict) or not message.get("role") or "content" not in message:
                raise InvalidCompletionRequest("every message needs a role and content", param="messages")
        if stream:
            raise InvalidCompletionRequest("Streaming responses are not supported", param="stream")

        return await self.client.openai_chat_completion(chat_id, model.strip(), messages, stream=False, **options)

    async def _record_exchange(self, session_id: str, question: str, result: Dict[str, Any]) -> None:
        conversation = await self.conversation_repository.get_by_remote_id(session_id)
        if conversation is None:
            return

        conversation.messages.append({"role": "user", "content": question})
        if isinstance(result, dict) and result.get("answer"):
            conversation.messages.append({"role": "assistant", "content": result["answer"]})
        conversation.message_count = len(conversation.messages)
        conversation.last_activity_time = datetime.utcnow()
        await self.conversation_repository.upsert(conversation)

    async def _mirror(self, remote: Dict[str, Any]) -> ChatAssistant:
        assistant = ChatAssistant.from_api(remote)
        for remote_dataset_id in assistant.dataset_ids:
            dataset = await self.dataset_repository.get_by_remote_id(remote_dataset_id)
            if dataset is not None:
                assistant.dataset_id = dataset.id
                break
        return await self.assistant_repository.upsert(assistant)
