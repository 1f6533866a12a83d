"""Typed settings handed to the server, client and view at startup."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class StorageSettings(BaseModel):
    sqlite_path: str = "countrystats.db"


class ServerSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 3001
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    static_dir: Optional[str] = None

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        # CORS_ORIGIN style: "https://a.example, https://b.example"
        if isinstance(value, str):
            value = value.split(",")
        return [origin.strip() for origin in value if origin and origin.strip()]


class ClientSettings(BaseModel):
    api_base_url: str = "http://127.0.0.1:3001"
    timeout_seconds: float = 10.0


class ViewSettings(BaseModel):
    page_size: int = Field(25, ge=1)
    page_size_options: List[int] = Field(default_factory=lambda: [10, 25, 50, 100], min_length=1)
    date_timezone: Literal["UTC", "local"] = "UTC"

    @field_validator("page_size_options")
    @classmethod
    def _positive_options(cls, value: List[int]) -> List[int]:
        if any(size < 1 for size in value):
            raise ValueError("page_size_options must all be at least 1")
        return value


class DemoSettings(BaseModel):
    countries_csv: str = "data/countries.csv"
    speakers_csv: str = "data/english_speakers.csv"
    programmers_csv: str = "data/programmers.csv"


class Settings(BaseModel):
    """Merged configuration (YAML file + environment overrides)."""

    storage: StorageSettings = Field(default_factory=StorageSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    client: ClientSettings = Field(default_factory=ClientSettings)
    view: ViewSettings = Field(default_factory=ViewSettings)
    demo: DemoSettings = Field(default_factory=DemoSettings)
    log_level: str = "INFO"
