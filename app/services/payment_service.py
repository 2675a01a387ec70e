# app/services/payment_service.py
import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, invalid_transition
from app.models.contract import MilestoneStatusEnum
from app.models.payment import Payment
from app.models.user import User
from app.repositories.payment_repo import PaymentRepository
from app.schemas.payment_schema import PaymentCreate
from app.services.contract_service import COMPANY_PARTY, ContractService, contract_party
from app.services.milestone_service import MilestoneService
from app.models.notification import NotificationTypeEnum
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class PaymentService:
    """
    只記錄付款，不串接金流。
    建立付款是里程碑 APPROVED -> PAID 的唯一途徑。
    """
    def __init__(self, db: AsyncSession):
        self.repo = PaymentRepository(db)
        self.milestone_service = MilestoneService(db)
        self.contract_service = ContractService(db)
        self.notification_service = NotificationService(db)

    async def record_payment(self, milestone_id: str, data: PaymentCreate, user: User) -> Payment:
        milestone = await self.milestone_service.get_milestone(milestone_id, user)
        contract = milestone.contract
        if contract_party(contract, user) != COMPANY_PARTY:
            raise ForbiddenError("只有公司可以付款")
        if milestone.status != MilestoneStatusEnum.approved:
            raise invalid_transition(milestone.status.value, MilestoneStatusEnum.paid.value)

        amount = Decimal(str(data.amount)) if data.amount is not None else milestone.amount
        payment = Payment(
            milestone_id=milestone_id,
            contract_id=contract.contract_id,
            payer_id=user.user_id,
            amount=amount,
            currency=data.currency.upper(),
            method=data.method,
            notes=data.notes,
            status="COMPLETED",
        )
        # 與付款紀錄一起 commit
        milestone.status = MilestoneStatusEnum.paid
        created = await self.repo.create_payment(payment)
        logger.info(f"里程碑 {milestone_id} 已付款 {amount} {payment.currency}")

        await self.notification_service.create_notification(
            user_id=contract.freelancer.user_id,
            type=NotificationTypeEnum.payment_received,
            title=f"里程碑「{milestone.title}」已付款",
            link_url=f"/contracts/{contract.contract_id}",
            data={"contract_id": contract.contract_id, "milestone_id": milestone.milestone_id, "payment_id": created.payment_id},
        )
        return created

    async def list_payments(self, contract_id: str, user: User, page: int, limit: int) -> dict:
        await self.contract_service.get_contract_details(contract_id, user)
        return await self.repo.list_payments_by_contract(contract_id, page, limit)
