from typing import Optional
from sqlalchemy.orm import Session
from ..database.models import ChatAssistantDB, ConversationDB
from ...domain.entities.chat import ChatAssistant, Conversation
from ...domain.repositories.chat_repository import ChatAssistantRepository, ConversationRepository
import logging

logger = logging.getLogger(__name__)


class SqlAlchemyChatAssistantRepository(ChatAssistantRepository):
    """SQLAlchemy implementation of ChatAssistantRepository."""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def upsert(self, assistant: ChatAssistant) -> ChatAssistant:
        """Insert or update assistant by remote ID."""
        assistant_db = self.db.query(ChatAssistantDB).filter(
            ChatAssistantDB.remote_id == assistant.remote_id
        ).first()

        if not assistant_db:
            assistant_db = ChatAssistantDB(remote_id=assistant.remote_id)
            self.db.add(assistant_db)

        assistant_db.name = assistant.name
        assistant_db.dataset_id = assistant.dataset_id
        assistant_db.dataset_ids = list(assistant.dataset_ids)
        assistant_db.description = assistant.description
        assistant_db.llm_model = assistant.llm_model
        assistant_db.system_prompt = assistant.system_prompt
        assistant_db.language = assistant.language
        assistant_db.assistant_config = assistant.config
        assistant_db.status = assistant.status
        assistant_db.remote_create_time = assistant.remote_create_time
        assistant_db.remote_update_time = assistant.remote_update_time
        assistant_db.last_sync_time = assistant.last_sync_time

        self.db.commit()
        self.db.refresh(assistant_db)

        assistant.id = assistant_db.id
        logger.info(f"Chat assistant {assistant.remote_id} synced to database")
        return assistant

    async def get_by_remote_id(self, remote_id: str) -> Optional[ChatAssistant]:
        """Get assistant by RAGFlow ID."""
        assistant_db = self.db.query(ChatAssistantDB).filter(
            ChatAssistantDB.remote_id == remote_id
        ).first()

        if not assistant_db:
            return None

        return ChatAssistant(
            id=assistant_db.id,
            remote_id=assistant_db.remote_id,
            name=assistant_db.name,
            dataset_id=assistant_db.dataset_id,
            dataset_ids=assistant_db.dataset_ids or [],
            description=assistant_db.description,
            llm_model=assistant_db.llm_model,
            system_prompt=assistant_db.system_prompt,
            language=assistant_db.language,
            config=assistant_db.assistant_config or {},
            status=assistant_db.status,
            remote_create_time=assistant_db.remote_create_time,
            remote_update_time=assistant_db.remote_update_time,
            last_sync_time=assistant_db.last_sync_time
        )

    async def delete_by_remote_id(self, remote_id: str) -> bool:
        """Delete assistant by RAGFlow ID."""
        assistant_db = self.db.query(ChatAssistantDB).filter(
            ChatAssistantDB.remote_id == remote_id
        ).first()

        if not assistant_db:
            return False

        self.db.delete(assistant_db)
        self.db.commit()

        logger.info(f"Chat assistant {remote_id} deleted from database")
        return True


class SqlAlchemyConversationRepository(ConversationRepository):
    """SQLAlchemy implementation of ConversationRepository."""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def upsert(self, conversation: Conversation) -> Conversation:
        """Insert or update conversation by remote ID."""
        conversation_db = self.db.query(ConversationDB).filter(
            ConversationDB.remote_id == conversation.remote_id
        ).first()

        if not conversation_db:
            conversation_db = ConversationDB(remote_id=conversation.remote_id)
            self.db.add(conversation_db)

        conversation_db.title = conversation.title
        conversation_db.chat_assistant_id = conversation.chat_assistant_id
        conversation_db.messages = list(conversation.messages)
        conversation_db.message_count = conversation.message_count
        conversation_db.status = conversation.status
        conversation_db.last_activity_time = conversation.last_activity_time
        conversation_db.remote_create_time = conversation.remote_create_time
        conversation_db.remote_update_time = conversation.remote_update_time
        conversation_db.last_sync_time = conversation.last_sync_time

        self.db.commit()
        self.db.refresh(conversation_db)

        conversation.id = conversation_db.id
        logger.info(f"Conversation {conversation.remote_id} synced to database")
        return conversation

    async def get_by_remote_id(self, remote_id: str) -> Optional[Conversation]:
        """Get conversation by RAGFlow ID."""
        conversation_db = self.db.query(ConversationDB).filter(
            ConversationDB.remote_id == remote_id
        ).first()

        if not conversation_db:
            return None

        return Conversation(
            id=conversation_db.id,
            remote_id=conversation_db.remote_id,
            title=conversation_db.title,
            chat_assistant_id=conversation_db.chat_assistant_id,
            messages=conversation_db.messages or [],
            message_count=conversation_db.message_count or 0,
            status=conversation_db.status,
            last_activity_time=conversation_db.last_activity_time,
            remote_create_time=conversation_db.remote_create_time,
            remote_update_time=conversation_db.remote_update_time,
            last_sync_time=conversation_db.last_sync_time
        )
