# app/services/tracking_service.py
import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.models.contract import ContractStatusEnum
from app.models.tracking_entry import TrackingEntry
from app.models.user import User
from app.repositories.tracking_repo import TrackingRepository
from app.schemas.tracking_schema import TrackingApprove, TrackingEntryCreate, TrackingEntryUpdate
from app.services.contract_service import (
    COMPANY_PARTY, FREELANCER_PARTY, ContractService, contract_party, ensure_contract_party,
)
from app.models.notification import NotificationTypeEnum
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class TrackingService:
    def __init__(self, db: AsyncSession):
        self.repo = TrackingRepository(db)
        self.contract_service = ContractService(db)
        self.notification_service = NotificationService(db)

    async def create_entry(self, contract_id: str, data: TrackingEntryCreate, user: User) -> TrackingEntry:
        contract = await self.contract_service.get_contract_details(contract_id, user)
        if contract_party(contract, user) != FREELANCER_PARTY:
            raise ForbiddenError("只有工作者可以新增工作紀錄")
        if contract.status != ContractStatusEnum.active:
            raise BadRequestError("合約尚未生效或已結束", code="CONTRACT_NOT_ACTIVE")

        entry = TrackingEntry(**data.model_dump(), contract_id=contract_id, approved=False)
        created = await self.repo.create_entry(entry)

        await self.notification_service.create_notification(
            user_id=contract.company.user_id,
            type=NotificationTypeEnum.tracking_submitted,
            title=f"合約「{contract.title}」有新的工作紀錄待核准",
            link_url=f"/contracts/{contract_id}",
            data={"contract_id": contract_id, "entry_id": created.entry_id},
        )
        return created

    async def list_entries(self, contract_id: str, user: User, page: int, limit: int) -> dict:
        await self.contract_service.get_contract_details(contract_id, user)
        return await self.repo.list_entries_by_contract(contract_id, page, limit)

    async def get_entry(self, entry_id: str, user: User) -> TrackingEntry:
        entry = await self.repo.get_entry_by_id(entry_id)
        if not entry:
            raise NotFoundError("工作紀錄不存在", code="TRACKING_NOT_FOUND")
        ensure_contract_party(entry.contract, user)
        return entry

    async def update_entry(self, entry_id: str, data: TrackingEntryUpdate, user: User) -> TrackingEntry:
        entry = await self.get_entry(entry_id, user)
        if contract_party(entry.contract, user) != FREELANCER_PARTY:
            raise ForbiddenError("只有工作者可以修改工作紀錄")
        # 核准後不可再修改
        if entry.approved:
            raise BadRequestError("工作紀錄已核准，無法修改", code="TRACKING_APPROVED")
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(entry, key, value)
        return await self.repo.update_entry(entry)

    async def approve_entry(self, entry_id: str, data: TrackingApprove, user: User) -> TrackingEntry:
        entry = await self.get_entry(entry_id, user)
        contract = entry.contract
        if contract_party(contract, user) != COMPANY_PARTY:
            raise ForbiddenError("只有公司可以核准工作紀錄")
        if entry.approved:
            raise BadRequestError("工作紀錄已核准", code="TRACKING_APPROVED")

        entry.approved = True
        entry.approved_at = datetime.now()
        if data.notes is not None:
            entry.notes = data.notes
        logger.info(f"工作紀錄 {entry_id} 已核准 (contract {contract.contract_id})")

        await self.notification_service.create_notification(
            user_id=contract.freelancer.user_id,
            type=NotificationTypeEnum.tracking_approved,
            title=f"你在合約「{contract.title}」的工作紀錄已核准",
            link_url=f"/contracts/{contract.contract_id}",
            data={"contract_id": contract.contract_id, "entry_id": entry.entry_id},
        )
        return await self.repo.update_entry(entry)
