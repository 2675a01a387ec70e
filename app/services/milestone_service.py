# app/services/milestone_service.py
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestError, ForbiddenError, NotFoundError, invalid_transition
from app.models.contract import ContractStatusEnum, Milestone, MilestoneStatusEnum
from app.models.user import User
from app.repositories.contract_repo import ContractRepository
from app.schemas.milestone_schema import MilestoneCreate, MilestoneStatusUpdate, MilestoneUpdate
from app.services.contract_service import (
    COMPANY_PARTY, FREELANCER_PARTY, ContractService, contract_party, ensure_contract_party,
)
from app.models.notification import NotificationTypeEnum
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

M = MilestoneStatusEnum

# APPROVED -> PAID 只能透過建立付款紀錄
MILESTONE_TRANSITIONS = {
    (M.pending, M.submitted): FREELANCER_PARTY,
    (M.submitted, M.approved): COMPANY_PARTY,
}

CLOSED_CONTRACT_STATUSES = (ContractStatusEnum.completed, ContractStatusEnum.terminated)


class MilestoneService:
    def __init__(self, db: AsyncSession):
        self.repo = ContractRepository(db)
        self.contract_service = ContractService(db)
        self.notification_service = NotificationService(db)

    async def create_milestone(self, contract_id: str, data: MilestoneCreate, user: User) -> Milestone:
        contract = await self.contract_service.get_contract_details(contract_id, user)
        if contract_party(contract, user) != COMPANY_PARTY:
            raise ForbiddenError("只有公司可以新增里程碑")
        if contract.status in CLOSED_CONTRACT_STATUSES:
            raise BadRequestError("合約已結束，無法新增里程碑", code="CONTRACT_CLOSED")

        milestone = Milestone(**data.model_dump(), contract_id=contract_id, status=M.pending)
        return await self.repo.create_milestone(milestone)

    async def list_milestones(self, contract_id: str, user: User) -> List[Milestone]:
        await self.contract_service.get_contract_details(contract_id, user)
        return await self.repo.list_milestones(contract_id)

    async def get_milestone(self, milestone_id: str, user: User) -> Milestone:
        milestone = await self.repo.get_milestone_by_id(milestone_id)
        if not milestone:
            raise NotFoundError("里程碑不存在", code="MILESTONE_NOT_FOUND")
        ensure_contract_party(milestone.contract, user)
        return milestone

    async def update_milestone(self, milestone_id: str, data: MilestoneUpdate, user: User) -> Milestone:
        milestone = await self.get_milestone(milestone_id, user)
        if contract_party(milestone.contract, user) != COMPANY_PARTY:
            raise ForbiddenError("只有公司可以修改里程碑")
        if milestone.status != M.pending:
            raise BadRequestError("里程碑已提交，無法修改", code="MILESTONE_LOCKED")
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(milestone, key, value)
        return await self.repo.update_milestone(milestone)

    async def update_milestone_status(
        self, milestone_id: str, data: MilestoneStatusUpdate, user: User
    ) -> Milestone:
        milestone = await self.get_milestone(milestone_id, user)
        contract = milestone.contract
        if contract.status != ContractStatusEnum.active:
            raise BadRequestError("合約尚未生效或已結束", code="CONTRACT_NOT_ACTIVE")

        transition = (milestone.status, data.status)
        if transition not in MILESTONE_TRANSITIONS:
            raise invalid_transition(milestone.status.value, data.status.value)
        party = contract_party(contract, user)
        if party != MILESTONE_TRANSITIONS[transition]:
            raise ForbiddenError(f"你無權執行此狀態轉移 ({milestone.status.value} -> {data.status.value})")

        logger.info(f"里程碑 {milestone_id} 狀態: {milestone.status.value} -> {data.status.value}")
        milestone.status = data.status
        if data.deliverable is not None and data.status == M.submitted:
            milestone.deliverable = data.deliverable

        notify_user_id = contract.company.user_id if party == FREELANCER_PARTY else contract.freelancer.user_id
        await self.notification_service.create_notification(
            user_id=notify_user_id,
            type=NotificationTypeEnum.milestone_status,
            title=f"里程碑「{milestone.title}」狀態已更新為 {data.status.value}",
            link_url=f"/contracts/{contract.contract_id}",
            data={"contract_id": contract.contract_id, "milestone_id": milestone.milestone_id, "status": data.status.value},
        )
        return await self.repo.update_milestone(milestone)
