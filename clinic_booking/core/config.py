from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List
import secrets


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Application
    APP_NAME: str = "Clinic Booking Service"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    TESTING: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./clinic_booking.db"
    TEST_DATABASE_URL: str = "sqlite:///./test.db"

    # Security
    SECRET_KEY: Optional[str] = None
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 5
    TOKEN_COOKIE_NAME: str = "token"
    COOKIE_SECURE: bool = False

    # CORS / hosts
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5000", "http://testserver"]
    ALLOWED_HOSTS: List[str] = ["localhost", "127.0.0.1", "*.localhost", "testserver"]

    @model_validator(mode="after")
    def require_secret_key(self) -> "Settings":
        """Refuse to run without a signing secret outside debug/testing.

        Debug and test runs get a random per-process secret, so tokens never
        survive a restart there.
        """
        if not self.SECRET_KEY:
            if not (self.DEBUG or self.TESTING):
                raise ValueError("SECRET_KEY must be set when not running in DEBUG or TESTING mode")
            self.SECRET_KEY = secrets.token_urlsafe(48)
        return self

    @property
    def get_database_url(self):
        """Return the appropriate database URL based on if we're testing"""
        if self.TESTING:
            return self.TEST_DATABASE_URL
        return self.DATABASE_URL


def get_settings() -> Settings:
    return Settings()
