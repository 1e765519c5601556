from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API Settings
    PROJECT_NAME: str = "Gastos Compartidos API"
    API_V1_STR: str = "/api/v1"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Shared expense events, invitations and pairwise balances"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "gastos"
    MONGODB_TIMEOUT_MS: int = 5000

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080"]

    # JWT
    SECRET_KEY: str = "change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Events
    MAX_TITLE_LENGTH: int = 80
    SUPPORTED_CURRENCIES: List[str] = ["ARS", "USD"]

    # Invitations
    TOKEN_LENGTH: int = 16
    INVITATION_MAX_USES: int = 100
    RECURRING_INVITATION_MAX_USES: int = 50
    RECURRING_INVITATION_TTL_DAYS: int = 30

    # Attachments
    UPLOAD_DIR: str = "uploads"
    ATTACHMENT_PREFIX: str = "events/"
    MAX_ATTACHMENT_BYTES: int = 1048576
    MAX_ATTACHMENTS_PER_EVENT: int = 2
    ALLOWED_ATTACHMENT_TYPES: List[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "application/pdf",
    ]

    # Push notifications
    PUSH_ENDPOINT_URL: str = ""
    PUSH_SERVER_KEY: str = ""
    PUSH_TIMEOUT_SECONDS: float = 5.0

    # Platform triggers
    TRIGGER_SECRET: str = "change-this-trigger-secret"

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
