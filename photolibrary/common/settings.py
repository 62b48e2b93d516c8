# photolibrary/common/settings.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from photolibrary.common.strings.splitters import csv_to_list


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    prefix: str = "/api"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["GET", "POST", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = False

    @field_validator("cors_allow_origins", "cors_allow_methods", "cors_allow_headers", mode="before")
    @classmethod
    def _split_csv(cls, v):
        return csv_to_list(v)


class DBConfig(BaseModel):
    echo: bool = False
    # SQLite file under cache_root by default; any SQLAlchemy URL works (DB__URL)
    url: Optional[str] = None


class ConcurrencyConfig(BaseModel):
    max_workers: int = 8
    max_queue: int = 64
    cancel_on_exit: bool = True

    @field_validator("cancel_on_exit", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v, default=True)


class FFProbeConfig(BaseModel):
    timeout_sec: int = 30
    bin: str = "ffprobe"
    ffmpeg_bin: str = "ffmpeg"


class AuthConfig(BaseModel):
    # authorized|limited|denied|notDetermined
    state: str = "authorized"
    # state reported after request_access() when currently notDetermined
    grant_on_request: str = "authorized"


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "photolibrary"
    app_env: str = "development"  # development|test|staging|production
    log_level: str = "INFO"

    # -------- Cache layout --------
    cache_root: Path = Path.home() / ".cache" / "photolibrary"
    thumbnails_subdir: str = "thumbnails"
    files_subdir: str = "files"

    # Base URL the cache root is served under; empty -> web paths fall back to local paths
    public_base_url: str = ""

    # -------- Library thumbnails (getLibrary / getThumbnailUrl) --------
    thumbnail_width: int = Field(512, ge=0, le=4096)
    thumbnail_height: int = Field(384, ge=0, le=4096)
    thumbnail_quality: float = Field(0.5, ge=0.0, le=1.0)

    # -------- Picker thumbnails (pickMedia) --------
    pick_thumbnail_width: int = Field(256, ge=0, le=4096)
    pick_thumbnail_height: int = Field(256, ge=0, le=4096)
    pick_thumbnail_quality: float = Field(0.7, ge=0.0, le=1.0)

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    db: DBConfig = DBConfig()
    concurrency: ConcurrencyConfig = ConcurrencyConfig()
    ffprobe: FFProbeConfig = FFProbeConfig()
    auth: AuthConfig = AuthConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Derived paths =====
    @computed_field  # type: ignore[misc]
    @property
    def thumbnails_root(self) -> Path:
        return self.cache_root / self.thumbnails_subdir

    @computed_field  # type: ignore[misc]
    @property
    def files_root(self) -> Path:
        return self.cache_root / self.files_subdir

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        if self.db.url:
            return self.db.url
        return f"sqlite:///{self.cache_root / 'library.db'}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from photolibrary.common.settings import get_settings
        cfg = get_settings()

    The cache directories are *not* created here; the artifact store creates
    them lazily on first write.
    """
    return Settings()  # pydantic_settings will read from .env automatically
