from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.core.constants import DocumentStoreProvider, Environment


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Environment Profile
    environment: Environment = Environment.LOCAL

    # App Settings
    app_name: str = "docqa-retrieval"
    debug: bool = False

    # Local LLM server (OpenAI-compatible, e.g. LM Studio)
    lm_api_key: str = "lmstudio"
    lm_base_url: str = "http://127.0.0.1:1234/v1"
    lm_model: str = "dolphin-2.9.3-mistral-nemo-12b-llamacppfixed:2"
    lm_timeout_ms: int = 120000  # Chat completions, including the model pre-load request

    # Embeddings
    disable_embeddings: bool = False  # Read once at startup, never per call
    embedding_model: Optional[str] = None  # Falls back to lm_model
    embedding_timeout_seconds: float = 10.0
    max_embedding_input_length: int = 8000
    synthetic_embedding_dimension: int = 384
    preload_model_before_ingest: bool = False  # Warm the model server before each ingest

    # Provider health check
    health_check_timeout_seconds: float = 3.0

    # Document Chunking
    chunk_size: int = 1000  # Soft target in characters
    chunk_overlap: int = 200  # Declared but not applied by the chunker

    # Lifecycle
    purge_documents_on_shutdown: bool = False

    # Ingestion / retrieval limits
    max_text_length: int = 1_000_000
    default_top_k: int = 5
    max_top_k: int = 20

    # Document Store
    document_store_provider: DocumentStoreProvider = DocumentStoreProvider.SQL

    # Database Components
    db_driver: str = "postgresql+asyncpg"
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "docqa"
    database_url_override: Optional[str] = None  # e.g. sqlite+aiosqlite:///docqa.db
    db_pool_size: int = 10
    db_pool_overflow: int = 5

    @property
    def database_url(self) -> str:
        """Construct database URL from components."""
        if self.database_url_override:
            return self.database_url_override
        return f"{self.db_driver}://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def resolved_embedding_model(self) -> str:
        """Embedding model id, defaulting to the chat model like the LM server setup."""
        return self.embedding_model or self.lm_model

    # OpenTelemetry
    otel_service_name: str = "docqa-retrieval"
    otel_exporter_endpoint: Optional[str] = None  # OTLP/HTTP traces endpoint
    otel_exporter_token: Optional[str] = None


settings = Settings()
