from pydantic import BaseModel, Field
from typing import Optional
from sebeta_mart.models.order import PaymentMethod


class OrderCreate(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)
    payment_method: PaymentMethod = PaymentMethod.CASH
    telebirr_txn_number: Optional[str] = Field(default=None, max_length=100)


class DeliveryAssignment(BaseModel):
    """Body of the assign-delivery endpoints. Presence is checked by the handler."""
    delivery_person_id: Optional[int] = None


class DeliveryCompletion(BaseModel):
    order_id: Optional[int] = None


class TransactionStatusUpdate(BaseModel):
    status: Optional[str] = None
