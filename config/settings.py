# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(
        default="http://localhost:5173", validation_alias="ALLOWED_ORIGIN"
    )
    MAX_FILE_MB: int = Field(default=10, validation_alias="MAX_FILE_MB")

    # Anthropic Settings (document-level semantic judge)
    ANTHROPIC_API_URL: str = Field(
        default="https://api.anthropic.com/v1/messages",
        validation_alias="ANTHROPIC_API_URL",
    )
    ANTHROPIC_MODEL: str = Field(
        default="claude-3-5-haiku-latest", validation_alias="ANTHROPIC_MODEL"
    )
    ANTHROPIC_VERSION: str = Field(
        default="2023-06-01", validation_alias="ANTHROPIC_VERSION"
    )
    ANTHROPIC_API_KEY: str | None = Field(
        default=None, validation_alias="ANTHROPIC_API_KEY"
    )
    JUDGE_TIMEOUT_SECONDS: float = Field(
        default=45.0, validation_alias="JUDGE_TIMEOUT_SECONDS"
    )
    JUDGE_MAX_WORDS: int = Field(default=900, validation_alias="JUDGE_MAX_WORDS")

    # Embedding Engine
    EMBEDDINGS_ENABLED: bool = Field(default=True, validation_alias="EMBEDDINGS_ENABLED")
    EMBEDDING_MODEL_NAME: str = "sentence-transformers/all-MiniLM-L6-v2"
    COMPARE_CONCURRENCY: int = Field(default=4, validation_alias="COMPARE_CONCURRENCY")

    # Embedding cache (Redis)
    EMBEDDING_CACHE_ENABLED: bool = Field(
        default=False, validation_alias="EMBEDDING_CACHE_ENABLED"
    )
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0", validation_alias="REDIS_URL"
    )
    EMBEDDING_CACHE_TTL_SECONDS: int = Field(
        default=7 * 24 * 3600, validation_alias="EMBEDDING_CACHE_TTL_SECONDS"
    )

    # Logging knobs
    LOGGER_NAME: str = "integrity-engine"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    # Prompts
    SEMANTIC_JUDGE_SYSTEM_PROMPT: str = (
        "You are an expert plagiarism detector specializing in paraphrase detection. "
        "Given TEXT A and TEXT B, decide whether they are semantically similar: the same "
        "meaning expressed with different words.\n"
        "\n"
        "Consider:\n"
        "- Do they convey the same main ideas?\n"
        "- Are key concepts identical, just reworded?\n"
        "- Is the logical flow the same?\n"
        "- Are specific facts, numbers or names the same?\n"
        "\n"
        "Return JSON ONLY, no code fences:\n"
        '{"semanticSimilarity":0.0-1.0,"isPlagiarism":true|false,"reasoning":"<brief>",'
        '"paraphrasedSections":["..."],"sharedConcepts":["..."]}\n'
        "semanticSimilarity: 0 = completely different, 1 = identical meaning.\n"
    )


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
