# app/repositories/tracking_repo.py
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from app.models.contract import Contract
from app.models.tracking_entry import TrackingEntry
from app.utils.pagination import fetch_page

logger = logging.getLogger(__name__)


class TrackingRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_entry(self, entry: TrackingEntry) -> TrackingEntry:
        try:
            self.db.add(entry)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立工作紀錄失敗: {e}", exc_info=True)
            raise
        await self.db.refresh(entry)
        return entry

    async def get_entry_by_id(self, entry_id: str) -> Optional[TrackingEntry]:
        stmt = (
            select(TrackingEntry)
            .where(TrackingEntry.entry_id == entry_id)
            .options(
                joinedload(TrackingEntry.contract).options(
                    joinedload(Contract.freelancer),
                    joinedload(Contract.company),
                )
            )
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_entries_by_contract(self, contract_id: str, page: int, limit: int) -> dict:
        stmt = (
            select(TrackingEntry)
            .where(TrackingEntry.contract_id == contract_id)
            .order_by(TrackingEntry.date.desc(), TrackingEntry.created_at.desc(), TrackingEntry.entry_id)
        )
        return await fetch_page(self.db, stmt, page, limit)

    async def update_entry(self, entry: TrackingEntry) -> TrackingEntry:
        await self.db.commit()
        await self.db.refresh(entry)
        return entry
