# app/repositories/dispute_repo.py
import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from app.models.company_profile import CompanyProfile
from app.models.contract import Contract
from app.models.dispute import Dispute, DisputeStatusEnum
from app.models.freelancer_profile import FreelancerProfile
from app.utils.pagination import fetch_page

logger = logging.getLogger(__name__)


class DisputeRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_common_dispute_options(self):
        return [
            joinedload(Dispute.contract).options(
                joinedload(Contract.freelancer),
                joinedload(Contract.company),
            ),
            joinedload(Dispute.opener),
        ]

    async def create(self, dispute: Dispute) -> Dispute:
        try:
            self.db.add(dispute)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立爭議失敗: {e}", exc_info=True)
            raise
        return await self.get_by_id(dispute.dispute_id)

    async def get_by_id(self, dispute_id: str) -> Optional[Dispute]:
        stmt = (
            select(Dispute)
            .where(Dispute.dispute_id == dispute_id)
            .options(*self._get_common_dispute_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_disputes(
        self,
        page: int,
        limit: int,
        status: Optional[DisputeStatusEnum] = None,
        user_id: Optional[str] = None,
    ) -> dict:
        """
        user_id 為 None 時列出全部 (管理員)
        否則只列出該使用者身為合約一方的爭議
        """
        stmt = select(Dispute)
        if user_id is not None:
            stmt = (
                stmt.join(Contract, Dispute.contract_id == Contract.contract_id)
                .join(FreelancerProfile, Contract.freelancer_id == FreelancerProfile.profile_id)
                .join(CompanyProfile, Contract.company_id == CompanyProfile.profile_id)
                .where(or_(FreelancerProfile.user_id == user_id, CompanyProfile.user_id == user_id))
            )
        if status is not None:
            stmt = stmt.where(Dispute.status == status)
        stmt = stmt.order_by(Dispute.created_at.desc(), Dispute.dispute_id)
        return await fetch_page(self.db, stmt, page, limit, self._get_common_dispute_options())

    async def update(self, dispute: Dispute) -> Dispute:
        await self.db.commit()
        return await self.get_by_id(dispute.dispute_id)
