# app/repositories/shortlist_repo.py
import logging
from typing import List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from app.models.freelancer_profile import FreelancerProfile
from app.models.shortlist import Shortlist

logger = logging.getLogger(__name__)


class ShortlistRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_common_shortlist_options(self):
        return [joinedload(Shortlist.freelancer).joinedload(FreelancerProfile.user)]

    async def create(self, entry: Shortlist) -> Shortlist:
        try:
            self.db.add(entry)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"加入候選名單失敗: {e}", exc_info=True)
            raise
        return await self.get_by_id(entry.shortlist_id)

    async def get_by_id(self, shortlist_id: str) -> Optional[Shortlist]:
        stmt = (
            select(Shortlist)
            .where(Shortlist.shortlist_id == shortlist_id)
            .options(*self._get_common_shortlist_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def find_existing(self, company_id: str, mission_id: str, freelancer_id: str) -> Optional[Shortlist]:
        stmt = select(Shortlist).where(
            Shortlist.company_id == company_id,
            Shortlist.mission_id == mission_id,
            Shortlist.freelancer_id == freelancer_id,
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_by_company(self, company_id: str, mission_id: Optional[str] = None) -> List[Shortlist]:
        stmt = select(Shortlist).where(Shortlist.company_id == company_id)
        if mission_id:
            stmt = stmt.where(Shortlist.mission_id == mission_id)
        stmt = stmt.options(*self._get_common_shortlist_options()).order_by(
            Shortlist.created_at.desc(), Shortlist.shortlist_id
        )
        result = await self.db.execute(stmt)
        return result.scalars().unique().all()

    async def get_shortlisted_freelancer_ids(self, mission_id: str) -> Set[str]:
        """媒合用：已在此任務候選名單中的工作者"""
        stmt = select(Shortlist.freelancer_id).where(Shortlist.mission_id == mission_id)
        result = await self.db.execute(stmt)
        return set(result.scalars().all())

    async def delete(self, entry: Shortlist) -> None:
        await self.db.delete(entry)
        await self.db.commit()
