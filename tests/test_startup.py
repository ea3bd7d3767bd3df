from __future__ import annotations

from contextlib import contextmanager

import pytest

import obravista.core.startup as startup_module
from obravista.core.enums import UserType
from obravista.models import User


def test_startup_raises_when_database_is_unreachable(monkeypatch):
    monkeypatch.setattr(startup_module, "verify_database_connection", lambda: False)

    with pytest.raises(RuntimeError, match="Database connectivity check failed"):
        startup_module.validate_startup_config()


def test_startup_passes_with_a_reachable_database(monkeypatch):
    monkeypatch.setattr(startup_module, "verify_database_connection", lambda: True)

    startup_module.validate_startup_config()


def test_seed_admin_runs_once(monkeypatch, session_factory):
    @contextmanager
    def _session():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    monkeypatch.setattr(startup_module, "get_db_session", _session)
    monkeypatch.setenv("ADMIN_EMAIL", "Dono@Obra.test")
    monkeypatch.setenv("ADMIN_PASSWORD", "primeira-senha")

    startup_module.seed_admin()
    startup_module.seed_admin()

    with session_factory() as db:
        users = db.query(User).all()
    assert [(user.email, user.type) for user in users] == [("dono@obra.test", UserType.ADMIN)]


def test_seed_admin_needs_credentials(monkeypatch, session_factory):
    monkeypatch.delenv("ADMIN_EMAIL", raising=False)
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    monkeypatch.setattr(startup_module, "get_db_session", lambda: pytest.fail("no session expected"))

    startup_module.seed_admin()
