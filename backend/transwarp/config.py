"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - The environment mode is read once at boot and never changes at runtime
    - get_settings() is cached (lru_cache) — single instance per process
    - Anything other than "production" is development mode

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Defaults provided for every setting: the server boots with no .env at all
    - Session secret has a development default; production deployments override it
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Process
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v

    # Handlers & filesystem
    handlers_package: str = "transwarp.handlers"
    upload_dir: str = "/tmp/itranswarp"
    templates_dir: str = str(PACKAGE_DIR / "templates")
    static_dir: str = str(PACKAGE_DIR / "static")

    # Development latency simulation for /api/ requests
    api_jitter_ms: int = 50

    # Identity
    session_cookie: str = "transwarpsession"
    session_secret: str = "transwarp-dev-secret"
    session_max_age: int = 7 * 24 * 3600

    # Theme & site metadata
    theme: str = "default"
    website_name: str = "Website Name"
    website_description: str = "website blablabla..."
    website_custom_header: str = ""
    website_custom_footer: str = ""

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def production_mode(self) -> bool:
        return self.environment == "production"

    @property
    def website(self) -> dict[str, str]:
        return {
            "name": self.website_name,
            "description": self.website_description,
            "custom_header": self.website_custom_header,
            "custom_footer": self.website_custom_footer,
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
