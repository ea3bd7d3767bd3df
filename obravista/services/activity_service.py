"""Activity log queries, statistics and retention cleanup."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import delete, func, select

from obravista.core.enums import LogAction, LogEntity
from obravista.core.exceptions import ValidationError
from obravista.models import ActivityLog
from obravista.schemas.activity import ActivityStats
from obravista.services.base_service import BaseService

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50


def record_activity(
    db,
    action: LogAction,
    *,
    actor_id: int | None,
    task_id: int | None,
    details: dict[str, Any],
    entity: LogEntity = LogEntity.TASK,
) -> ActivityLog:
    """Stage a log row in ``db``; it is written by the caller's commit."""
    entry = ActivityLog(user_id=actor_id, task_id=task_id, entity=entity, action=action, details=details)
    db.add(entry)
    return entry


class ActivityService(BaseService):
    def list_logs(
        self,
        user_id: int | None = None,
        task_id: int | None = None,
        entity: LogEntity | None = None,
        action: LogAction | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[ActivityLog]:
        """Newest entries first, optionally filtered."""
        query = select(ActivityLog)
        if user_id is not None:
            query = query.where(ActivityLog.user_id == user_id)
        if task_id is not None:
            query = query.where(ActivityLog.task_id == task_id)
        if entity is not None:
            query = query.where(ActivityLog.entity == entity)
        if action is not None:
            query = query.where(ActivityLog.action == action)
        query = query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).limit(limit)
        return list(self.db.scalars(query))

    def stats(
        self,
        user_id: int | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> ActivityStats:
        if start is not None and end is not None and start > end:
            raise ValidationError("The start of the period must not be after its end.")
        filters = []
        if user_id is not None:
            filters.append(ActivityLog.user_id == user_id)
        if start is not None:
            filters.append(ActivityLog.created_at >= start)
        if end is not None:
            filters.append(ActivityLog.created_at <= end)

        by_action = {action: 0 for action in LogAction}
        by_entity = {entity: 0 for entity in LogEntity}
        rows = self.db.execute(
            select(ActivityLog.action, ActivityLog.entity, func.count(ActivityLog.id))
            .where(*filters)
            .group_by(ActivityLog.action, ActivityLog.entity)
        )
        for action, entity, count in rows:
            by_action[LogAction(action)] += count
            by_entity[LogEntity(entity)] += count
        return ActivityStats(total=sum(by_action.values()), by_action=by_action, by_entity=by_entity)

    def purge_older_than(self, days: int = 90) -> int:
        if days < 1:
            raise ValidationError("Logs must be kept for at least one day.")
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        result = self.db.execute(delete(ActivityLog).where(ActivityLog.created_at < cutoff))
        self.commit()
        logger.info("activity.logs_purged", extra={"event": "activity.logs_purged", "removed": result.rowcount})
        return result.rowcount
