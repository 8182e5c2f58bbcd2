"""Application configuration."""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    
    # Database
    DATABASE_URL: str = "postgresql+asyncpg://leadlove:leadlove@db:5432/leadlove"
    
    # Domain probe
    DOMAIN_CHECK_TIMEOUT: int = 5000  # milliseconds
    DOMAIN_CHECK_USER_AGENT: str = "LeadLove-Bot/1.0 (+https://leadlove.app)"
    
    # Google Places directory
    GOOGLE_PLACES_API_KEY: Optional[str] = None
    GOOGLE_PLACES_TIMEOUT: float = 10.0  # seconds
    
    # Batch enrichment
    ENRICHMENT_MAX_CONCURRENT: int = 5
    MAX_LEADS_PER_BATCH: int = 1000
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
