from typing import List, Optional

from loguru import logger
from pydantic import model_validator
from pydantic_settings import BaseSettings

# Only ever used outside production; see Settings.resolve_secret_key
DEV_SECRET_KEY = "development-secret-change-in-production"
PRODUCTION_ENVS = {"prod", "production"}


class Settings(BaseSettings):
    DATABASE_URL: str

    # If DEV and you hit SSL cert issues, set DB_SSL_VERIFY=false in .env
    DB_SSL_VERIFY: bool = True

    ENV: str = "dev"  # "dev", "test" or "prod"

    SECRET_KEY: Optional[str] = None
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    SESSION_COOKIE_NAME: str = "session_token"

    SUPER_ADMIN_EMAIL: Optional[str] = None
    SUPER_ADMIN_PASSWORD: Optional[str] = None
    SUPER_ADMIN_NAME: Optional[str] = "Faculty Admin"

    # --- RATE LIMITING ---
    REDIS_URL: Optional[str] = None
    RATE_LIMIT_ENABLED: bool = True

    # --- UPLOADS ---
    STORAGE_BACKEND: str = "local"  # "local" or "supabase"
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    SUPABASE_BUCKET: str = "asset-documents"

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def is_production(self) -> bool:
        return self.ENV.strip().lower() in PRODUCTION_ENVS

    @model_validator(mode="after")
    def resolve_secret_key(self):
        """
        The token secret must be injected explicitly in production.
        Anywhere else a fixed development secret is used, loudly.
        """
        if self.SECRET_KEY:
            return self

        if self.is_production:
            raise ValueError("SECRET_KEY environment variable is required in production")

        logger.warning("SECRET_KEY is not set. Using the development secret (ENV={}).", self.ENV)
        self.SECRET_KEY = DEV_SECRET_KEY
        return self


settings = Settings()
