from functools import lru_cache
from typing import List, Literal
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]
BackendName = Literal["auto", "file", "remote-kv", "memory"]

DEFAULT_SESSION_SECRET = "dev-secret-change-me"

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "KnifeStorefront"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"
    ALLOWED_ORIGINS: str = ""               # CSV list for CORS

    # Storage: auto probes disk, then remote KV, then memory
    STORAGE_BACKEND: BackendName = "auto"
    DATA_DIR: str = "data"

    # Remote key-value service (redis protocol)
    KV_URL: str = ""
    KV_TOKEN: str = ""
    KV_KEY_PREFIX: str = "nugi"

    # Admin sessions
    SESSION_SECRET: str = DEFAULT_SESSION_SECRET
    OAUTH_SECRET: str = ""                  # falls back to SESSION_SECRET
    ADMIN_EMAILS: str = ""                  # CSV allow-list for OAuth admins
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "password123"
    SESSION_MAX_AGE: int = 8 * 3600         # 8 hours
    COOKIE_SECURE: bool = True

    # API
    api_prefix: str = "/api"

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True)

    @property
    def admin_emails(self) -> List[str]:
        return [e.strip().lower() for e in self.ADMIN_EMAILS.split(",") if e.strip()]

    @property
    def allowed_origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def oauth_secret(self) -> str:
        return self.OAUTH_SECRET or self.SESSION_SECRET

    @property
    def kv_configured(self) -> bool:
        return bool(self.KV_URL)

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
