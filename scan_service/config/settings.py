from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    log_file: str = ""

    temp_root: str = "temp"
    results_root: str = "results"
    samples_root: str = "templates"
    isolate_working_areas: bool = True

    bytecode_dir_name: str = "bytecode_modules"
    scanner_binary: str = ""
    scanner_timeout_seconds: int = Field(default=600, gt=0)
    result_id_length: int = Field(default=10, ge=6, le=64)

    retention_interval_seconds: int = Field(default=3600, gt=0)

    http_host: str = "0.0.0.0"
    http_port: int = 8080
