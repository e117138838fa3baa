import logging
import os
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    # Gemini Configuration
    google_api_key: Optional[str] = Field(None, description="Google API key for the Gemini completion service")
    gemini_model: str = Field("gemini-2.0-flash")
    gemini_base_url: str = Field("https://generativelanguage.googleapis.com/v1beta")
    completion_timeout_seconds: Optional[float] = Field(None, description="Unset means wait for the model indefinitely")

    # Suggestion Configuration
    default_location: str = Field("Israel")
    max_suggestions: int = Field(3)
    search_url: str = Field("https://www.google.com/search?q=")

    # Application Configuration
    debug: bool = Field(False)
    log_level: str = Field("INFO")
    host: str = Field("0.0.0.0")
    port: int = Field(3001)

    # CORS Configuration
    cors_origins: List[str] = Field(default=["*"])

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

# Create global settings instance
try:
    settings = Settings()
except Exception as e:
    logger.error(f"Error loading settings: {e}")
    # Create settings with environment variables directly as fallback
    settings = Settings(
        google_api_key=os.getenv("GOOGLE_API_KEY"),
        debug=os.getenv("DEBUG", "false").lower() == "true",
        cors_origins=["*"]
    )
