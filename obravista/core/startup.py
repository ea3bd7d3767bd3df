"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging
import os

from obravista.core.config import get_config
from obravista.core.enums import UserType
from obravista.core.logging_config import configure_logging
from obravista.database.db import get_db_session, init_db, verify_database_connection

logger = logging.getLogger(__name__)


def validate_startup_config() -> None:
    """Fail-fast config and connectivity checks."""
    config = get_config()
    if not verify_database_connection():
        raise RuntimeError("Database connectivity check failed.")

    if config.is_production and config.DATABASE_URL.startswith("sqlite"):
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": config.DATABASE_URL.split("://", 1)[0],
            "upload_dir": config.UPLOAD_DIR,
        },
    )


def seed_admin() -> None:
    """Create the first admin from ADMIN_EMAIL / ADMIN_PASSWORD when no user exists yet."""
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        return

    from obravista.services.user_service import UserService

    with get_db_session() as db:
        service = UserService(db)
        if service.list_users():
            return
        service.create_user(name="Administrador", email=email, password=password, user_type=UserType.ADMIN)
    logger.info("startup.admin_seeded", extra={"event": "startup.admin_seeded"})


def bootstrap() -> None:
    """Initialize logging, create tables and validate runtime configuration."""
    configure_logging()
    init_db()
    validate_startup_config()
    seed_admin()
