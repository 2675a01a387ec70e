# app/schemas/payment_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

# milestone_id 從 URL 取得；amount 省略時使用里程碑金額
class PaymentCreate(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment_id: str
    milestone_id: str
    contract_id: str
    payer_id: str
    amount: float
    currency: str
    method: Optional[str] = None
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
