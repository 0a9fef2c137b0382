from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings with type-safe configuration management."""

    # Security Configuration
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    ALGORITHM: str = "HS256"

    # Rate limits for the public auth endpoints
    REGISTER_RATE_LIMIT: str = "10/minute"
    LOGIN_RATE_LIMIT: str = "20/minute"

    # Payment QR Configuration
    PAYMENT_UPI_ID: str = "eventhub@upi"
    QR_SERVICE_URL: str = "https://api.qrserver.com/v1/create-qr-code/"
    QR_CODE_SIZE: str = "300x300"

    # CORS Configuration
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5000"

    # Environment
    ENVIRONMENT: str = "development"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def allowed_origins_list(self) -> List[str]:
        """Convert comma-separated ALLOWED_ORIGINS string to list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


# Create a single instance to be imported throughout the app
settings = Settings()
