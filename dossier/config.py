import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field
from sqlalchemy.engine import make_url

DEFAULT_PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    env: str = Field(default_factory=lambda: os.getenv("ENV", "dev"))
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "4000")))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "info"))

    # Storage endpoint and credential. DB_PASSWORD wins over any password in DB_URL
    db_url: str | None = Field(default_factory=lambda: os.getenv("DB_URL"))
    db_password: str | None = Field(default_factory=lambda: os.getenv("DB_PASSWORD"))
    db_echo: bool = Field(default_factory=lambda: _env_flag("DB_ECHO"))

    # Static frontend
    public_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("PUBLIC_DIR", str(DEFAULT_PUBLIC_DIR)))
    )

    # Observability
    service_name: str = "dossier-api"
    otel_exporter_otlp_endpoint: str | None = Field(
        default_factory=lambda: os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    )

    def database_url(self) -> str:
        """Return the configured storage URL with the credential applied."""
        if not self.db_url:
            raise ValueError("DB_URL not configured")
        url = make_url(self.db_url)
        if self.db_password:
            url = url.set(password=self.db_password)
        return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
