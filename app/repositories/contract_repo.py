# app/repositories/contract_repo.py

import logging
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload, joinedload
from typing import List, Optional

from app.models.contract import Contract, ContractStatusEnum, Milestone
from app.models.company_profile import CompanyProfile
from app.models.freelancer_profile import FreelancerProfile
from app.utils.pagination import fetch_page

logger = logging.getLogger(__name__)


class ContractRepository:
    """
    封裝對 'contracts' 與 'milestones' 資料表的 CRUD 操作
    """
    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_common_contract_options(self):
        """
        定義 ContractOut Schema 所需的 Eager Loading 策略，避免 N+1 查詢
        (async session 不能 lazy load)
        """
        return [
            # 1. 任務 (many-to-one)
            joinedload(Contract.mission),
            # 2. 工作者 Profile 與其 User
            joinedload(Contract.freelancer).joinedload(FreelancerProfile.user),
            # 3. 公司 Profile
            joinedload(Contract.company),
            # 4. 里程碑 (1-to-Many)
            selectinload(Contract.milestones),
        ]

    async def create_contract(self, contract: Contract) -> Contract:
        """
        (C) 將新的合約物件存入資料庫
        """
        try:
            self.db.add(contract)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立合約失敗: {e}", exc_info=True)
            raise
        return await self.get_contract_by_id(contract.contract_id)

    async def get_contract_by_id(self, contract_id: str) -> Optional[Contract]:
        """
        (R) 透過 ID 獲取單一合約，並 Eager Loading 關聯資料
        """
        stmt = (
            select(Contract)
            .where(Contract.contract_id == contract_id)
            .options(*self._get_common_contract_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_contracts_by_user(self, user_id: str, page: int, limit: int) -> dict:
        """
        (R) 獲取某個使用者 (作為公司 或 作為工作者) 的所有合約
        """
        stmt = (
            select(Contract)
            .join(FreelancerProfile, Contract.freelancer_id == FreelancerProfile.profile_id)
            .join(CompanyProfile, Contract.company_id == CompanyProfile.profile_id)
            .where(or_(FreelancerProfile.user_id == user_id, CompanyProfile.user_id == user_id))
            .order_by(Contract.updated_at.desc(), Contract.contract_id)
        )
        return await fetch_page(self.db, stmt, page, limit, self._get_common_contract_options())

    async def get_open_contract(self, mission_id: str, freelancer_id: str) -> Optional[Contract]:
        """同一任務與工作者尚未終止的合約"""
        stmt = select(Contract).where(
            Contract.mission_id == mission_id,
            Contract.freelancer_id == freelancer_id,
            Contract.status != ContractStatusEnum.terminated,
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def update_contract(self, contract: Contract) -> Contract:
        """
        (U) 儲存對現有 Contract 物件的變更
        (由 Service 層傳入修改後的 Contract 物件)
        """
        await self.db.commit()
        return await self.get_contract_by_id(contract.contract_id)

    # --- Milestones ---
    async def create_milestone(self, milestone: Milestone) -> Milestone:
        try:
            self.db.add(milestone)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立里程碑失敗: {e}", exc_info=True)
            raise
        await self.db.refresh(milestone)
        return milestone

    async def get_milestone_by_id(self, milestone_id: str) -> Optional[Milestone]:
        """連同合約雙方一起載入 (權限檢查用)"""
        stmt = (
            select(Milestone)
            .where(Milestone.milestone_id == milestone_id)
            .options(
                joinedload(Milestone.contract).options(
                    joinedload(Contract.freelancer),
                    joinedload(Contract.company),
                )
            )
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_milestones(self, contract_id: str) -> List[Milestone]:
        stmt = (
            select(Milestone)
            .where(Milestone.contract_id == contract_id)
            .order_by(Milestone.due_date, Milestone.created_at, Milestone.milestone_id)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def update_milestone(self, milestone: Milestone) -> Milestone:
        await self.db.commit()
        await self.db.refresh(milestone)
        return milestone
