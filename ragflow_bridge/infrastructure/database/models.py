from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, Text, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from shared.utils.database import Base


class DatasetDB(Base):
    """SQLAlchemy model for Dataset entity."""
    __tablename__ = "rag_flow_dataset"

    id = Column(Integer, primary_key=True, autoincrement=True)
    remote_id = Column(String(255), unique=True, nullable=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text)
    parser_method = Column(String(100))
    chunk_method = Column(String(100))
    chunk_size = Column(Integer)
    language = Column(String(10))
    embedding_model = Column(String(255))
    similarity_threshold = Column(Float)
    status = Column(String(50))
    enabled = Column(Boolean, nullable=False, default=True)
    chunk_config = Column(JSON)
    remote_create_time = Column(DateTime)
    remote_update_time = Column(DateTime)
    last_sync_time = Column(DateTime)
    create_time = Column(DateTime, nullable=False)
    update_time = Column(DateTime, nullable=False)

    documents = relationship("DocumentDB", back_populates="dataset", cascade="all, delete-orphan")
    chat_assistants = relationship("ChatAssistantDB", back_populates="dataset")


class DocumentDB(Base):
    """SQLAlchemy model for Document entity."""
    __tablename__ = "rag_flow_document"

    id = Column(Integer, primary_key=True, autoincrement=True)
    remote_id = Column(String(255), unique=True, nullable=True, index=True)
    dataset_id = Column(Integer, ForeignKey("rag_flow_dataset.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    filename = Column(String(255))
    file_path = Column(String(500))
    type = Column(String(50))
    mime_type = Column(String(255))
    size = Column(Integer)
    status = Column(String(50), nullable=False)
    parse_status = Column(String(50))
    progress = Column(Float)
    progress_msg = Column(Text)
    language = Column(String(10))
    chunk_count = Column(Integer)
    summary = Column(Text)
    remote_create_time = Column(DateTime)
    remote_update_time = Column(DateTime)
    last_sync_time = Column(DateTime)
    create_time = Column(DateTime, nullable=False)
    update_time = Column(DateTime, nullable=False)

    dataset = relationship("DatasetDB", back_populates="documents")
    chunks = relationship("ChunkDB", back_populates="document", cascade="all, delete-orphan")


class ChatAssistantDB(Base):
    """SQLAlchemy model for ChatAssistant entity."""
    __tablename__ = "rag_flow_chat_assistant"

    id = Column(Integer, primary_key=True, autoincrement=True)
    remote_id = Column(String(255), unique=True, nullable=False, index=True)
    dataset_id = Column(Integer, ForeignKey("rag_flow_dataset.id", ondelete="SET NULL"), nullable=True)
    dataset_ids = Column(JSON)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    llm_model = Column(String(255))
    system_prompt = Column(Text)
    language = Column(String(10))
    assistant_config = Column(JSON)
    status = Column(String(50))
    remote_create_time = Column(DateTime)
    remote_update_time = Column(DateTime)
    last_sync_time = Column(DateTime)

    dataset = relationship("DatasetDB", back_populates="chat_assistants")
    conversations = relationship("ConversationDB", back_populates="chat_assistant", cascade="all, delete-orphan")


class ConversationDB(Base):
    """SQLAlchemy model for Conversation entity."""
    __tablename__ = "rag_flow_conversation"

    id = Column(Integer, primary_key=True, autoincrement=True)
    remote_id = Column(String(255), unique=True, nullable=False, index=True)
    chat_assistant_id = Column(Integer, ForeignKey("rag_flow_chat_assistant.id", ondelete="CASCADE"), nullable=True)
    title = Column(String(255), nullable=False)
    messages = Column(JSON)
    message_count = Column(Integer, nullable=False, default=0)
    status = Column(String(50))
    last_activity_time = Column(DateTime)
    remote_create_time = Column(DateTime)
    remote_update_time = Column(DateTime)
    last_sync_time = Column(DateTime)

    chat_assistant = relationship("ChatAssistantDB", back_populates="conversations")


class ChunkDB(Base):
    """SQLAlchemy model for Chunk entity."""
    __tablename__ = "rag_flow_chunk"
    __table_args__ = (UniqueConstraint("document_id", "remote_id", name="uq_chunk_document_remote"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    remote_id = Column(String(255), nullable=False, index=True)
    document_id = Column(Integer, ForeignKey("rag_flow_document.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text)
    position = Column(Integer)
    size = Column(Integer)
    page_number = Column(Integer)
    positions = Column(JSON)
    keywords = Column(JSON)
    available = Column(Boolean, nullable=False, default=True)
    chunk_metadata = Column(JSON)
    last_sync_time = Column(DateTime)

    document = relationship("DocumentDB", back_populates="chunks")


class AgentDB(Base):
    """SQLAlchemy model for Agent entity."""
    __tablename__ = "rag_flow_agent"

    id = Column(Integer, primary_key=True, autoincrement=True)
    remote_id = Column(String(255), unique=True, nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    dsl = Column(JSON)
    status = Column(String(50), nullable=False, index=True)
    sync_error_message = Column(Text)
    remote_create_time = Column(DateTime)
    remote_update_time = Column(DateTime)
    last_sync_time = Column(DateTime)
    create_time = Column(DateTime, nullable=False)
    update_time = Column(DateTime, nullable=False)
