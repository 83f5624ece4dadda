"""Pydantic schemas for playground configuration."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class PlaygroundConfig(BaseModel):
    """Playground configuration.

    Example YAML:
        namespace: myapp:experiments
        store: redis
        redis_url: redis://localhost:6379/0
        load_path: experiments
    """

    namespace: str = Field("playground", description="Prefix for every store key")
    store: Literal["redis", "memory"] = Field(
        "redis", description="Store backend ('memory' is process-local)"
    )
    redis_url: str = Field(
        "redis://localhost:6379/0", description="Redis connection URL"
    )
    load_path: Path = Field(
        Path("experiments"), description="Directory containing definition units"
    )
    socket_timeout: float = Field(
        5.0, description="Redis socket timeout in seconds", gt=0
    )

    @field_validator("namespace")
    @classmethod
    def namespace_must_be_a_key_prefix(cls, v: str) -> str:
        """Validate namespace is non-empty and has no whitespace."""
        if not v or any(c.isspace() for c in v):
            raise ValueError("namespace must be non-empty and contain no whitespace")
        return v

    @field_validator("redis_url")
    @classmethod
    def redis_url_scheme(cls, v: str) -> str:
        """Validate redis URL scheme."""
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError(f"redis_url must use redis://, rediss:// or unix://, got {v!r}")
        return v

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlaygroundConfig:
        """Create config from a parsed YAML mapping."""
        return cls.model_validate(data)
