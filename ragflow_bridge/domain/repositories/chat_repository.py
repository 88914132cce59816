from abc import ABC, abstractmethod
from typing import Optional
from ..entities.chat import ChatAssistant, Conversation


class ChatAssistantRepository(ABC):
    """Abstract repository for chat assistant mirrors."""

    @abstractmethod
    async def upsert(self, assistant: ChatAssistant) -> ChatAssistant:
        """Insert or update the assistant identified by its remote ID."""
        pass

    @abstractmethod
    async def get_by_remote_id(self, remote_id: str) -> Optional[ChatAssistant]:
        """Get assistant by RAGFlow ID."""
        pass

    @abstractmethod
    async def delete_by_remote_id(self, remote_id: str) -> bool:
        """Delete assistant and its conversations."""
        pass


class ConversationRepository(ABC):
    """Abstract repository for conversation mirrors."""

    @abstractmethod
    async def upsert(self, conversation: Conversation) -> Conversation:
        """Insert or update the conversation identified by its remote ID."""
        pass

    @abstractmethod
    async def get_by_remote_id(self, remote_id: str) -> Optional[Conversation]:
        """Get conversation by RAGFlow ID."""
        pass
