from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_admin_user
from app.models.user import User
from app.schemas.booking import Booking as BookingSchema, PaymentResult
from app.services import booking_service

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/bookings/{booking_id}/result", response_model=BookingSchema)
def record_payment_result(
    booking_id: UUID,
    data: PaymentResult,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """
    Called by the payment integration once the gateway has settled.
    Signature checks happen in the integration, not here.
    """
    return booking_service.record_payment_result(
        db, booking_id, data.succeeded, data.payment_reference
    )
