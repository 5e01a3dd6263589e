"""Configuration settings loaded from environment variables."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()


_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def is_ci() -> bool:
    """Whether the process runs under a CI environment."""
    return _env_flag("CI")


class Settings(BaseModel):
    """Snapshot settings loaded from environment variables."""

    # Update policy
    update_snapshot: Literal["new", "all", "none"] = Field(
        default="new",
        description="Snapshot update mode: new (record missing), all (overwrite and prune), none (never write)",
    )
    expand: bool = Field(
        default=False,
        description="Show full context in snapshot diffs",
    )

    # Snapshot file layout
    snapshot_dir: str = Field(
        default="__snapshots__",
        min_length=1,
        description="Directory, next to the test file, holding snapshot files",
    )
    snapshot_extension: str = Field(
        default=".snap",
        pattern=r"^\.\w+$",
        description="File extension for snapshot files",
    )

    # Serialization
    serializer: Literal["pretty", "amber"] = Field(
        default="pretty",
        description="Serializer used to render received values",
    )
    print_basic_prototype: bool = Field(
        default=False,
        description="Print 'dict'/'list' type tags for plain containers",
    )

    log_level: str = Field(default="INFO", description="Logging level")

    model_config = {"extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance loaded from environment."""
    return Settings(
        update_snapshot=os.getenv("SNAPSHOT_UPDATE", "none" if is_ci() else "new"),  # type: ignore[arg-type]
        expand=_env_flag("SNAPSHOT_EXPAND"),
        snapshot_dir=os.getenv("SNAPSHOT_DIR", "__snapshots__"),
        snapshot_extension=os.getenv("SNAPSHOT_EXTENSION", ".snap"),
        serializer=os.getenv("SNAPSHOT_SERIALIZER", "pretty"),  # type: ignore[arg-type]
        print_basic_prototype=_env_flag("SNAPSHOT_PRINT_BASIC_PROTOTYPE"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
