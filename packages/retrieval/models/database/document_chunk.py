from sqlalchemy import Column, String, Integer, Text, JSON, DateTime, Index
from sqlalchemy.sql import func
from common.db.base import Base, BigIntegerType


class DocumentChunkEntity(Base):
    __tablename__ = "document_chunks"
    __table_args__ = (
        # Every read and delete is scoped by this pair
        Index("ix_document_chunks_document_session", "document_id", "session_id"),
    )

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    chunk_id = Column(String, nullable=False, index=True)  # "{document_id}-{index}"
    document_id = Column(String, nullable=False, index=True)
    session_id = Column(String, nullable=False, index=True)
    chunk_index = Column(Integer, nullable=False)  # 0-based position in document
    source = Column(String, nullable=False)  # Filename or URL
    text = Column(Text, nullable=False)
    embedding = Column(JSON, nullable=False)  # List[float]
    created_at = Column(DateTime(timezone=True), server_default=func.now())
