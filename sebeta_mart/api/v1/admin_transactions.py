"""
Admin Transaction Endpoints
Every order seen as a taxed transaction
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any
from sebeta_mart.database import get_db
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.schemas.order import TransactionStatusUpdate
from sebeta_mart.models.order import Order, OrderStatus
from sebeta_mart.models.user import User
from sebeta_mart.api.deps import require_staff
from sebeta_mart.services import order_service
from sebeta_mart.utils.formatters import format_order
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

TAX_RATE = Decimal("0.15")
CENT = Decimal("0.01")
TRANSACTION_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.BUYER_CONFIRMED,
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED,
)


def _to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_transaction(order: Order) -> Dict[str, Any]:
    total_price = Decimal(str(order.total_price or 0))
    tax = _to_cents(total_price * TAX_RATE)

    data = format_order(order)
    data.update({
        "buyer_name": order.buyer.full_name if order.buyer else None,
        "buyer_email": order.buyer.email if order.buyer else None,
        "buyer_phone": order.buyer.phone_number if order.buyer else None,
        "tax": float(tax),
        "total_with_tax": float(_to_cents(total_price + tax)),
    })
    return data


def _get_order_or_404(db: Session, order_id: int) -> Order:
    order = db.query(Order).options(joinedload(Order.buyer)).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return order


@router.get("", response_model=ResponseModel)
def list_transactions(
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """All orders with tax breakdown and a summary, newest first"""
    orders = db.query(Order).options(joinedload(Order.buyer)).order_by(
        Order.created_at.desc(), Order.id.desc()
    ).all()
    transactions = [format_transaction(o) for o in orders]

    revenue = sum((Decimal(str(o.total_price or 0)) for o in orders), Decimal("0"))
    total_tax = sum((Decimal(str(t["tax"])) for t in transactions), Decimal("0"))
    by_status: Dict[str, int] = {}
    for t in transactions:
        by_status[t["status"]] = by_status.get(t["status"], 0) + 1

    summary = {
        "total_transactions": len(transactions),
        "total_revenue": float(_to_cents(revenue)),
        "total_tax": float(_to_cents(total_tax)),
        "total_with_tax": float(_to_cents(revenue + total_tax)),
        "by_status": by_status,
    }

    return ResponseModel(
        success=True,
        data={
            "transactions": transactions,
            "summary": summary,
            "count": len(transactions),
            "tax_rate": f"{int(TAX_RATE * 100)}%",
        }
    )


@router.get("/{order_id}", response_model=ResponseModel)
def get_transaction(
    order_id: int,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    order = _get_order_or_404(db, order_id)
    return ResponseModel(success=True, data=format_transaction(order))


@router.patch("/{order_id}/status", response_model=ResponseModel)
def update_transaction_status(
    order_id: int,
    status_data: TransactionStatusUpdate,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    allowed = [s.value for s in TRANSACTION_STATUSES]
    if status_data.status not in allowed:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status. Must be one of: {', '.join(allowed)}"
        )

    order = order_service.set_transaction_status(db, order_id, OrderStatus(status_data.status))

    logger.info("Staff %s set transaction %s to %s", staff.id, order.id, order.status.value)
    return ResponseModel(
        success=True,
        data=format_transaction(order),
        message=f"Transaction status updated to {order.status.value}"
    )
