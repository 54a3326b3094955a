from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AnyHttpUrl, Field, SecretStr


class Settings(BaseSettings):
    # Embedding service (OpenRouter-compatible /embeddings endpoint)
    openrouter_api_key: SecretStr = SecretStr("")
    embedding_api_url: AnyHttpUrl = "https://openrouter.ai/api/v1/embeddings"
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embedding_dimension: int = 384
    embedding_batch_size: int = Field(10, gt=0)
    embedding_max_tokens: int = 512
    embedding_timeout: float = 60.0

    app_title: str = "GhostNote RAG"
    app_referer: str = "https://ghostnote.site"

    # Chunking / retrieval
    chunk_size: int = Field(500, gt=0)
    chunk_overlap: int = Field(100, ge=0)
    rag_threshold: int = 2000
    rag_top_k: int = 5
    rag_fallback_chars: int = 5000

    # Session vector store lifetime (seconds)
    session_ttl_seconds: float = 60 * 60
    eviction_interval_seconds: float = 10 * 60

    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
