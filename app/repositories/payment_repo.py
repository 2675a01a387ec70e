# app/repositories/payment_repo.py
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.payment import Payment
from app.utils.pagination import fetch_page

logger = logging.getLogger(__name__)


class PaymentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_payment(self, payment: Payment) -> Payment:
        """
        新增付款紀錄。
        里程碑狀態 (-> PAID) 由 Service 在同一個 session 中修改，這裡一起 commit
        """
        try:
            self.db.add(payment)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立付款紀錄失敗: {e}", exc_info=True)
            raise
        await self.db.refresh(payment)
        return payment

    async def list_payments_by_contract(self, contract_id: str, page: int, limit: int) -> dict:
        stmt = (
            select(Payment)
            .where(Payment.contract_id == contract_id)
            .order_by(Payment.created_at.desc(), Payment.payment_id)
        )
        return await fetch_page(self.db, stmt, page, limit)
