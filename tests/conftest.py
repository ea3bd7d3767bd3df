from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from obravista.auth.jwt import create_access_token
from obravista.core.config import get_config
from obravista.core.enums import AssignmentKind, ContractType, UserType
from obravista.core.security import hash_password
from obravista.database.db import get_db
from obravista.models import Base, Contractor, Crew, Lead, Site, User


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    monkeypatch.setenv("UPLOAD_DIR", str(target))
    get_config.cache_clear()
    yield target
    get_config.cache_clear()


@pytest.fixture
def app(session_factory):
    from obravista.main import create_app

    application = create_app(run_bootstrap=False)

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    application.dependency_overrides[get_db] = _override_get_db
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_user(session_factory):
    def _make(email="admin@obra.test", user_type=UserType.ADMIN, permissions=None, password="secret123"):
        with session_factory() as db:
            user = User(
                name=email.split("@")[0],
                email=email,
                hashed_password=hash_password(password),
                type=user_type,
                custom_permissions=permissions or {},
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            return user

    return _make


def auth_headers(user) -> dict[str, str]:
    token = create_access_token(user.id, user.email, user.type, secret=get_config().JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(make_user):
    return auth_headers(make_user())


@pytest.fixture
def seed(session):
    """Lead, site, crew and contractors shared by service tests."""
    lead = Lead(name="Maria Souza", address="Rua das Flores, 10")
    site = Site(name="Casa Jardim", address="Rua A, 1")
    crew = Crew(name="Alvenaria")
    mason = Contractor(name="Joao Pedreiro", cpf="12345678901", daily_rate=200, uses_attendance=True)
    office = Contractor(
        name="Ana Escritorio",
        cpf="98765432100",
        contract_type=ContractType.PAYROLL,
        salary=3000,
        advance_amount=1200,
        uses_attendance=False,
    )
    session.add_all([lead, site, crew, mason, office])
    session.commit()
    return {"lead": lead, "site": site, "crew": crew, "mason": mason, "office": office}


def crew_task_payload(site_id: int, crew_id: int, **overrides):
    payload = {
        "site_id": site_id,
        "title": "Levantar paredes",
        "assignment_kind": AssignmentKind.CREW,
        "crew_id": crew_id,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def task_payload():
    return crew_task_payload
