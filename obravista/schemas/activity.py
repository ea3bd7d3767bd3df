"""Activity log schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from obravista.core.enums import LogAction, LogEntity


class ActivityLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int | None = None
    task_id: int | None = None
    entity: LogEntity
    action: LogAction
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class ActivityStats(BaseModel):
    total: int
    by_action: dict[LogAction, int]
    by_entity: dict[LogEntity, int]


class CleanupResult(BaseModel):
    removed: int
    kept_days: int
