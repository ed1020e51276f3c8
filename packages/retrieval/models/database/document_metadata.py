from sqlalchemy import Column, String, Integer, DateTime, Index
from common.db.base import Base, BigIntegerType


class DocumentMetadataEntity(Base):
    __tablename__ = "document_metadata"
    __table_args__ = (
        Index("ix_document_metadata_document_session", "document_id", "session_id"),
        Index("ix_document_metadata_session_processed", "session_id", "processed_at"),
    )

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    document_id = Column(String, nullable=False, index=True)
    session_id = Column(String, nullable=False, index=True)
    source = Column(String, nullable=False)
    processed_at = Column(DateTime(timezone=True), nullable=False)
    chunk_count = Column(Integer, nullable=False)
