"""Construction site (obra) records."""

from __future__ import annotations

from sqlalchemy import select

from obravista.core.enums import SiteStatus
from obravista.models import Site
from obravista.schemas.sites import SiteCreateRequest, SiteUpdateRequest
from obravista.services.base_service import BaseService


class SiteService(BaseService):
    def list_sites(self, status: SiteStatus | None = None) -> list[Site]:
        query = select(Site).order_by(Site.name)
        if status is not None:
            query = query.where(Site.status == status)
        return list(self.db.scalars(query))

    def get_site(self, site_id: int) -> Site:
        return self._require(Site, site_id, "Site")

    def create_site(self, payload: SiteCreateRequest) -> Site:
        site = Site(**payload.model_dump())
        self.db.add(site)
        self.commit()
        self.db.refresh(site)
        return site

    def update_site(self, site_id: int, payload: SiteUpdateRequest) -> Site:
        site = self.get_site(site_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(site, field, value)
        self.commit()
        self.db.refresh(site)
        return site
