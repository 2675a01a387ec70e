# app/repositories/mission_repo.py
import logging
from typing import List, Optional

from sqlalchemy import String, cast, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from app.models.mission import Mission, MissionStatusEnum
from app.utils.pagination import fetch_page

logger = logging.getLogger(__name__)


class MissionRepository:
    """
    封裝對 'missions' 資料表的 CRUD 操作
    """
    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_common_mission_options(self):
        # MissionOut 需要 company
        return [joinedload(Mission.company)]

    async def create_mission(self, mission: Mission) -> Mission:
        try:
            self.db.add(mission)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立任務失敗: {e}", exc_info=True)
            raise
        return await self.get_mission_by_id(mission.mission_id)

    async def get_mission_by_id(self, mission_id: str) -> Optional[Mission]:
        stmt = (
            select(Mission)
            .where(Mission.mission_id == mission_id)
            .options(*self._get_common_mission_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_missions(
        self,
        page: int,
        limit: int,
        status: Optional[MissionStatusEnum] = MissionStatusEnum.published,
        q: Optional[str] = None,
        skill: Optional[str] = None,
        modality: Optional[str] = None,
        experience: Optional[str] = None,
    ) -> dict:
        """
        公開的任務列表 (預設只列出 PUBLISHED)
        - q: 標題 / 描述關鍵字
        - skill: 必要技能 (JSON 欄位，以字串比對)
        """
        stmt = select(Mission)
        if status is not None:
            stmt = stmt.where(Mission.status == status)
        if q:
            pattern = f"%{q}%"
            stmt = stmt.where(or_(Mission.title.ilike(pattern), Mission.description.ilike(pattern)))
        if skill:
            stmt = stmt.where(cast(Mission.required_skills, String).ilike(f"%{skill}%"))
        if modality:
            stmt = stmt.where(Mission.modality == modality)
        if experience:
            stmt = stmt.where(Mission.experience == experience)
        stmt = stmt.order_by(Mission.created_at.desc(), Mission.mission_id)
        return await fetch_page(self.db, stmt, page, limit, self._get_common_mission_options())

    async def list_missions_by_company(self, company_id: str, page: int, limit: int) -> dict:
        stmt = (
            select(Mission)
            .where(Mission.company_id == company_id)
            .order_by(Mission.created_at.desc(), Mission.mission_id)
        )
        return await fetch_page(self.db, stmt, page, limit, self._get_common_mission_options())

    async def list_published_missions(self, limit: int) -> List[Mission]:
        """媒合用：最多取 limit 筆 PUBLISHED 任務"""
        stmt = (
            select(Mission)
            .where(Mission.status == MissionStatusEnum.published)
            .options(*self._get_common_mission_options())
            .order_by(Mission.created_at, Mission.mission_id)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return result.scalars().unique().all()

    async def update_mission(self, mission: Mission) -> Mission:
        """
        儲存對現有 Mission 物件的變更
        (由 Service 層傳入修改後的 Mission 物件)
        """
        await self.db.commit()
        return await self.get_mission_by_id(mission.mission_id)
