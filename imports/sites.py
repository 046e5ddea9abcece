"""
Lookup of import targets (sites)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.site import Site


@dataclass(frozen=True)
class SiteInfo:
    id: int
    name: str
    created_at: datetime

    @property
    def created_on(self) -> date:
        return self.created_at.date()


class SiteRegistry(ABC):

    @abstractmethod
    async def get_site(self, site_id: int) -> Optional[SiteInfo]:
        """Return the site, or None if it no longer exists"""
        pass


class SqlSiteRegistry(SiteRegistry):

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_site(self, site_id: int) -> Optional[SiteInfo]:
        result = await self.db.execute(
            select(Site.id, Site.name, Site.created_at).where(Site.id == site_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return SiteInfo(id=row.id, name=row.name, created_at=row.created_at)
