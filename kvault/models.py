"""Secret version model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SecretVersion(BaseModel):
    """One historical version of a secret, value included."""

    model_config = ConfigDict(frozen=True)

    id: str
    value: str = ""
    enabled: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    expires_at: datetime | None = None
    tags: dict[str, str] = Field(default_factory=dict)

    @property
    def short_id(self) -> str:
        return self.id[:8]
