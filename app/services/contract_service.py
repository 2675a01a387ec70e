# app/services/contract_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import Optional
import logging

from app.core.exceptions import (
    BadRequestError, ConflictError, ForbiddenError, NotFoundError, ValidationError, invalid_transition
)
from app.models.application import ApplicationStatusEnum
from app.models.contract import Contract, ContractStatusEnum
from app.models.user import User, UserRoleEnum
from app.schemas.contract_schema import ContractCreate, ContractUpdate, ContractStatusUpdate
from app.repositories.contract_repo import ContractRepository
from app.repositories.application_repo import ApplicationRepository
from app.repositories.profile_repo import ProfileRepository
from app.services.mission_service import MissionService
from app.models.notification import NotificationTypeEnum
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# 合約一方的身分
FREELANCER_PARTY = "freelancer"
COMPANY_PARTY = "company"

C = ContractStatusEnum

# PATCH /contracts/{id}/status 的狀態機
# 簽署 (DRAFT -> PENDING_SIGNATURES -> ACTIVE) 只能走 /sign
CONTRACT_TRANSITIONS = {
    (C.active, C.completed): [COMPANY_PARTY],
    (C.draft, C.terminated): [COMPANY_PARTY, FREELANCER_PARTY],
    (C.pending_signatures, C.terminated): [COMPANY_PARTY, FREELANCER_PARTY],
    (C.active, C.terminated): [COMPANY_PARTY, FREELANCER_PARTY],
}

SIGNABLE_STATUSES = (C.draft, C.pending_signatures)


def contract_party(contract: Contract, user: User) -> Optional[str]:
    """回傳使用者在合約中的身分，不是合約雙方則回傳 None"""
    if contract.freelancer is not None and contract.freelancer.user_id == user.user_id:
        return FREELANCER_PARTY
    if contract.company is not None and contract.company.user_id == user.user_id:
        return COMPANY_PARTY
    return None


def ensure_contract_party(contract: Contract, user: User, allow_admin: bool = True) -> Optional[str]:
    party = contract_party(contract, user)
    if party is None and not (allow_admin and user.role == UserRoleEnum.admin):
        raise ForbiddenError("你無權檢視此合約")
    return party


class ContractService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.contract_repo = ContractRepository(db)
        self.application_repo = ApplicationRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.mission_service = MissionService(db)
        self.notification_service = NotificationService(db)

    def _other_party_user_id(self, contract: Contract, party: Optional[str]) -> str:
        if party == FREELANCER_PARTY:
            return contract.company.user_id
        return contract.freelancer.user_id

    async def create_contract(self, data: ContractCreate, user: User) -> Contract:
        """
        公司針對已錄取的申請建立合約草案 (DRAFT)
        """
        mission = await self.mission_service.get_owned_mission(data.mission_id, user)

        freelancer = await self.profile_repo.get_freelancer_profile_by_id(data.freelancer_id)
        if not freelancer:
            raise NotFoundError("工作者不存在", code="FREELANCER_NOT_FOUND")

        application = await self.application_repo.get_application_by_mission_and_freelancer(
            mission.mission_id, freelancer.profile_id
        )
        if not application or application.status != ApplicationStatusEnum.accepted:
            raise BadRequestError("此工作者在該任務沒有已錄取的申請", code="APPLICATION_NOT_ACCEPTED")

        existing = await self.contract_repo.get_open_contract(mission.mission_id, freelancer.profile_id)
        if existing:
            raise ConflictError("此任務與工作者已有合約", code="CONTRACT_EXISTS")

        new_contract = Contract(
            **data.model_dump(exclude_none=True),
            company_id=mission.company_id,
            status=C.draft,
        )
        created = await self.contract_repo.create_contract(new_contract)
        logger.info(f"建立合約 {created.contract_id} (mission {mission.mission_id})")

        await self.notification_service.create_notification(
            user_id=freelancer.user_id,
            type=NotificationTypeEnum.contract_created,
            title=f"公司已建立合約草案「{created.title}」",
            message="請檢視合約內容並確認簽署。",
            link_url=f"/contracts/{created.contract_id}",
            data={"contract_id": created.contract_id, "mission_id": created.mission_id},
        )
        return created

    async def get_contract_details(self, contract_id: str, user: User) -> Contract:
        contract = await self.contract_repo.get_contract_by_id(contract_id)
        if not contract:
            raise NotFoundError("合約不存在", code="CONTRACT_NOT_FOUND")
        ensure_contract_party(contract, user)
        return contract

    async def get_my_contracts(self, user: User, page: int, limit: int) -> dict:
        return await self.contract_repo.list_contracts_by_user(user.user_id, page, limit)

    async def update_draft_contract(self, contract_id: str, data: ContractUpdate, user: User) -> Contract:
        contract = await self.get_contract_details(contract_id, user)
        if contract_party(contract, user) != COMPANY_PARTY:
            raise ForbiddenError("只有公司可以修改合約草案")
        if contract.status != C.draft:
            raise BadRequestError("合約已進入簽署流程，無法修改", code="CONTRACT_LOCKED")
        changes = data.model_dump(exclude_unset=True)
        hourly_rate = changes.get("hourly_rate", contract.hourly_rate)
        fixed_price = changes.get("fixed_price", contract.fixed_price)
        if hourly_rate is None and fixed_price is None:
            raise ValidationError(
                "hourly_rate 或 fixed_price 至少需要填寫一個",
                details=[{"field": "hourly_rate", "message": "hourly_rate 或 fixed_price 至少需要填寫一個"}],
            )
        for key, value in changes.items():
            setattr(contract, key, value)
        return await self.contract_repo.update_contract(contract)

    async def sign_contract(self, contract_id: str, user: User) -> Contract:
        """
        合約一方簽署
        - 第一個簽署: DRAFT -> PENDING_SIGNATURES
        - 雙方都簽署: -> ACTIVE
        """
        contract = await self.get_contract_details(contract_id, user)
        party = contract_party(contract, user)
        if party is None:
            raise ForbiddenError("只有合約雙方可以簽署")
        if contract.status not in SIGNABLE_STATUSES:
            raise invalid_transition(contract.status.value, C.active.value)

        if party == FREELANCER_PARTY:
            if contract.freelancer_signed:
                raise ConflictError("你已簽署此合約", code="ALREADY_SIGNED")
            contract.freelancer_signed = True
        else:
            if contract.company_signed:
                raise ConflictError("你已簽署此合約", code="ALREADY_SIGNED")
            contract.company_signed = True

        previous = contract.status
        if contract.freelancer_signed and contract.company_signed:
            contract.status = C.active
            contract.signed_at = datetime.now()
        else:
            contract.status = C.pending_signatures
        logger.info(f"合約 {contract_id} 由 {party} 簽署: {previous.value} -> {contract.status.value}")

        await self.notification_service.create_notification(
            user_id=self._other_party_user_id(contract, party),
            type=NotificationTypeEnum.contract_signed,
            title=f"合約「{contract.title}」已由對方簽署",
            link_url=f"/contracts/{contract_id}",
            data={"contract_id": contract_id, "status": contract.status.value},
        )
        return await self.contract_repo.update_contract(contract)

    async def update_contract_status(
        self, 
        contract_id: str, 
        data: ContractStatusUpdate, 
        user: User
    ) -> Contract:
        contract = await self.get_contract_details(contract_id, user)
        party = contract_party(contract, user)

        transition = (contract.status, data.status)
        if transition not in CONTRACT_TRANSITIONS:
            raise invalid_transition(contract.status.value, data.status.value)
        if party not in CONTRACT_TRANSITIONS[transition]:
            raise ForbiddenError(f"你無權執行此狀態轉移 ({contract.status.value} -> {data.status.value})")

        logger.info(f"合約 {contract_id} 狀態: {contract.status.value} -> {data.status.value}")
        contract.status = data.status
        if data.status == C.completed and contract.end_date is None:
            contract.end_date = datetime.now()

        await self.notification_service.create_notification(
            user_id=self._other_party_user_id(contract, party),
            type=NotificationTypeEnum.contract_status,
            title=f"合約「{contract.title}」狀態已更新為 {data.status.value}",
            link_url=f"/contracts/{contract_id}",
            data={"contract_id": contract_id, "status": data.status.value},
        )
        return await self.contract_repo.update_contract(contract)
