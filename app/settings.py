import os
from pydantic import BaseModel
from functools import lru_cache
from dotenv import load_dotenv
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    APP_NAME: str = os.getenv("APP_NAME", "Web3 Resume Screening")
    ENV: str = os.getenv("ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    SQLITE_PATH: str = os.getenv("SQLITE_PATH", "app.sqlite3")

    # one credential gates both the chat and the embedding backend
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY") or None
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o")
    OPENAI_EMBEDDING_MODEL: str = os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small")
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.2"))
    LLM_TIMEOUT_SECONDS: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

    # remote | mock | simplified
    EMBEDDING_MODE: str = os.getenv("EMBEDDING_MODE", "remote")
    EMBEDDING_TIMEOUT_SECONDS: float = float(os.getenv("EMBEDDING_TIMEOUT_SECONDS", "15"))
    EMBEDDING_TRUSTED_CONTEXT: bool = _env_bool("EMBEDDING_TRUSTED_CONTEXT", "true")
    EMBEDDING_CACHE_SIZE: int = int(os.getenv("EMBEDDING_CACHE_SIZE", "2048"))

    CHUNK_SIZE: int = int(os.getenv("CHUNK_SIZE", "1000"))
    CHUNK_OVERLAP: int = int(os.getenv("CHUNK_OVERLAP", "200"))
    CONTEXT_SIMILARITY_FLOOR: float = float(os.getenv("CONTEXT_SIMILARITY_FLOOR", "0.6"))
    SKILL_EXTRACTION_THRESHOLD: float = float(os.getenv("SKILL_EXTRACTION_THRESHOLD", "0.75"))
    PARTIAL_MATCH_PENALTY: int = int(os.getenv("PARTIAL_MATCH_PENALTY", "2"))

    BOOTSTRAP_KNOWLEDGE_BASE: bool = _env_bool("BOOTSTRAP_KNOWLEDGE_BASE", "true")


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
