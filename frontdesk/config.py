import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    APP_NAME: str = "FrontDesk"
    # Core settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development").lower()
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./frontdesk.db")
    # Run metadata.create_all() on startup (development only; use Alembic otherwise)
    AUTO_CREATE_SCHEMA: bool = os.getenv("AUTO_CREATE_SCHEMA", "true").lower() == "true"

    # Identifiers
    GRC_PREFIX: str = os.getenv("GRC_PREFIX", "GRC")
    REFERENCE_PREFIX: str = os.getenv("REFERENCE_PREFIX", "REF")

    # Cash reports
    CASH_PAGE_SIZE: int = int(os.getenv("CASH_PAGE_SIZE", "10"))
    CASH_PAGE_SIZE_MAX: int = int(os.getenv("CASH_PAGE_SIZE_MAX", "100"))

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
    RATE_LIMIT_WRITE: str = os.getenv("RATE_LIMIT_WRITE", "30/minute")

settings = Settings()
