"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RoutingSettings(BaseSettings):
    """Swap route search parameters."""

    model_config = SettingsConfigDict(env_prefix="ROUTING_")

    # Hard bound on edges per swap path; longer routes are never returned.
    max_swap_hops: int = Field(default=5, ge=1, le=5)


class StorageSettings(BaseSettings):
    """Trade options persistence backend.

    ``memory`` keeps options for the lifetime of the process only,
    ``json`` writes one file per network key under ``directory``.
    All fields configurable via STORAGE_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    backend: Literal["memory", "json"] = "memory"
    directory: str = "data/trade_options"


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    chain_id: str = "mainnet"
    routing: RoutingSettings = RoutingSettings()
    storage: StorageSettings = StorageSettings()
