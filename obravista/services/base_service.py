"""Shared service base with robust session lifecycle behavior."""

from __future__ import annotations

from typing import TypeVar

from sqlalchemy.orm import Session

from obravista.core.exceptions import NotFoundError
from obravista.database import db as database

ModelT = TypeVar("ModelT")


class BaseService:
    """Base class for services that operate on a SQLAlchemy session."""

    def __init__(self, db: Session | None = None) -> None:
        self.db = db or database.SessionLocal()

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        self.db.close()

    def _require(self, model: type[ModelT], entity_id: int, label: str) -> ModelT:
        instance = self.db.get(model, entity_id)
        if instance is None:
            raise NotFoundError(f"{label} {entity_id} not found.")
        return instance

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
