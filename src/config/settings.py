"""
Application Configuration Settings
"""

from pydantic_settings import BaseSettings
from typing import List
import os


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Expense Claim Approval System"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./expense_claims.db"

    # Identity supplied by the upstream authenticating gateway
    USER_ID_HEADER: str = "X-User-Id"

    # Report identifiers
    REPORT_ID_PREFIX: str = "REQ-"
    REPORT_ID_WIDTH: int = 4

    # Claims
    DEFAULT_CLAIM_CURRENCY: str = "USD"
    SUPPORTED_CURRENCIES: str = "USD,EUR,GBP,JPY,SGD,MYR,AUD,CAD"  # Comma-separated string

    @property
    def supported_currencies_list(self) -> List[str]:
        """Convert comma-separated string to list"""
        return [code.strip().upper() for code in self.SUPPORTED_CURRENCIES.split(",") if code.strip()]

    # Only users listed on a report may sign it
    ENFORCE_DESIGNATED_SIGNERS: bool = True

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"  # Comma-separated string

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert comma-separated string to list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create settings instance
settings = Settings()


os.makedirs("logs", exist_ok=True)
