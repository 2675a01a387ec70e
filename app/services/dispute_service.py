# app/services/dispute_service.py
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError, invalid_transition
from app.models.dispute import Dispute, DisputeStatusEnum
from app.models.user import User, UserRoleEnum
from app.repositories.dispute_repo import DisputeRepository
from app.schemas.dispute_schema import DisputeCreate, DisputeResolve, DisputeUpdate
from app.services.contract_service import ContractService, contract_party, ensure_contract_party
from app.models.notification import NotificationTypeEnum
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

D = DisputeStatusEnum

# 只能往前走，由管理員處理
DISPUTE_TRANSITIONS = {
    (D.open, D.in_review),
    (D.open, D.resolved),
    (D.open, D.closed),
    (D.in_review, D.resolved),
    (D.in_review, D.closed),
    (D.resolved, D.closed),
}

# 進入這些狀態時必須附上處理結果
RESOLUTION_REQUIRED = (D.resolved, D.closed)


class DisputeService:
    def __init__(self, db: AsyncSession):
        self.repo = DisputeRepository(db)
        self.contract_service = ContractService(db)
        self.notification_service = NotificationService(db)

    async def open_dispute(self, data: DisputeCreate, user: User) -> Dispute:
        contract = await self.contract_service.get_contract_details(data.contract_id, user)
        if contract_party(contract, user) is None:
            raise ForbiddenError("只有合約雙方可以提出爭議")

        dispute = Dispute(
            **data.model_dump(),
            opened_by=user.user_id,
            status=D.open,
        )
        created = await self.repo.create(dispute)
        logger.info(f"合約 {contract.contract_id} 由 {user.user_id} 提出爭議 {created.dispute_id}")
        return created

    async def list_disputes(
        self, user: User, page: int, limit: int, status: Optional[DisputeStatusEnum] = None
    ) -> dict:
        # 管理員看全部，其他人只看自己合約的爭議
        user_id = None if user.role == UserRoleEnum.admin else user.user_id
        return await self.repo.list_disputes(page, limit, status=status, user_id=user_id)

    async def get_dispute(self, dispute_id: str, user: User) -> Dispute:
        dispute = await self.repo.get_by_id(dispute_id)
        if not dispute:
            raise NotFoundError("爭議不存在", code="DISPUTE_NOT_FOUND")
        ensure_contract_party(dispute.contract, user)
        return dispute

    async def _transition(
        self, dispute: Dispute, new_status: DisputeStatusEnum, resolution: Optional[str], admin: User
    ) -> Dispute:
        if new_status != dispute.status:
            if (dispute.status, new_status) not in DISPUTE_TRANSITIONS:
                raise invalid_transition(dispute.status.value, new_status.value)
        resolution = resolution if resolution is not None else dispute.resolution
        if new_status in RESOLUTION_REQUIRED and not (resolution and resolution.strip()):
            raise ValidationError(
                "結案時必須填寫處理結果",
                details=[{"field": "resolution", "message": "RESOLVED / CLOSED 需要 resolution"}],
            )

        logger.info(f"爭議 {dispute.dispute_id} 狀態: {dispute.status.value} -> {new_status.value} (admin {admin.user_id})")
        dispute.status = new_status
        dispute.resolution = resolution
        if new_status in RESOLUTION_REQUIRED and dispute.resolved_at is None:
            dispute.resolved_at = datetime.now()

        for user_id in sorted({dispute.opened_by, dispute.contract.freelancer.user_id, dispute.contract.company.user_id}):
            await self.notification_service.create_notification(
                user_id=user_id,
                type=NotificationTypeEnum.dispute_updated,
                title=f"爭議「{dispute.reason}」狀態已更新為 {new_status.value}",
                link_url=f"/disputes/{dispute.dispute_id}",
                data={"dispute_id": dispute.dispute_id, "status": new_status.value},
            )
        return await self.repo.update(dispute)

    async def update_dispute(self, dispute_id: str, data: DisputeUpdate, admin: User) -> Dispute:
        dispute = await self.get_dispute(dispute_id, admin)
        new_status = data.status or dispute.status
        return await self._transition(dispute, new_status, data.resolution, admin)

    async def resolve_dispute(self, dispute_id: str, data: DisputeResolve, admin: User) -> Dispute:
        dispute = await self.get_dispute(dispute_id, admin)
        return await self._transition(dispute, D(data.status), data.resolution, admin)
