"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from obravista.api.v1 import attendance, auth, budgets, crm, health, logs, people, sites, tasks, tools, users
from obravista.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(crm.router)
api_router.include_router(sites.router)
api_router.include_router(tasks.router)
api_router.include_router(logs.router)
api_router.include_router(people.router)
api_router.include_router(attendance.router)
api_router.include_router(tools.router)
api_router.include_router(budgets.router)


def get_api_router() -> APIRouter:
    return api_router
