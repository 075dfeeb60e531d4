from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """notesearch runtime settings.

    All values are loaded from environment variables.
    A .env file in the working directory is also supported.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Input caps (bound Levenshtein / cosine cost) ---
    MAX_TOKEN_LENGTH: int = 64  # characters of a token seen by edit distance
    MAX_VECTOR_TERMS: int = 4096  # distinct terms kept per term vector
    MAX_QUERY_LENGTH: int = 1000  # longer queries are truncated

    # --- Suggestions ---
    SUGGESTION_LIMIT: int = 15

    # --- HTTP host ---
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings singleton."""
    return Settings()
