from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Loads keys from process env, and also from a local .env file for convenience.
    model_config = SettingsConfigDict(env_prefix="", extra="ignore", env_file=".env", env_file_encoding="utf-8")

    data_dir: str = "data"
    log_level: str = "INFO"

    # Keys
    gemini_api_key: str | None = None

    # Models
    gemini_image_model: str = "gemini-2.0-flash-exp"
    request_timeout_s: float = 120.0

    # Prompting
    prompt_target_resolution: Literal["HD", "FHD"] = "FHD"
    prompt_strict_literal_guard: bool = True

    # Export
    export_fit_mode: Literal["cover", "contain"] = "cover"


settings = Settings()
