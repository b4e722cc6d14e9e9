from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "development"
    DATABASE_URL: str = "sqlite:///./booking.db"
    LOG_FILE: str = "app.log"
    # Comma-separated
    CORS_ORIGINS: str = "*"

    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    # Booking policies
    REQUIRE_EXISTING_USER: bool = True
    REVALIDATE_ON_ADMIN_EDIT: bool = False

    # Accept plain userId/adminId values when no bearer token is sent
    TRUST_CLIENT_IDS: bool = True

    # Business-rule failures answer 200 with ok=false instead of 4xx
    SOFT_FAILURES: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
