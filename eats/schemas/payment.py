from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime

from eats.schemas.common import CoreOutput


class CreatePaymentInput(BaseModel):
    transaction_id: str
    restaurant_id: int


class PaymentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    transaction_id: str
    user_id: int
    restaurant_id: int
    created_at: Optional[datetime] = None


class CreatePaymentOutput(CoreOutput):
    pass


class GetPaymentsOutput(CoreOutput):
    payments: Optional[List[PaymentRead]] = None
