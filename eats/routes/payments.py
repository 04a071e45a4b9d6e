from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eats.db.session import get_db
from eats.schemas.payment import CreatePaymentInput, CreatePaymentOutput, GetPaymentsOutput
from eats.services.auth import require_roles
from eats.services.payments import PaymentsService

router = APIRouter(prefix="/payments", tags=["Payments"])


def get_payments_service(db: Session = Depends(get_db)):
    return PaymentsService(db)


@router.post("", response_model=CreatePaymentOutput)
@router.post("/", response_model=CreatePaymentOutput)
def create_payment(payload: CreatePaymentInput, owner=Depends(require_roles("Owner")),
                   service: PaymentsService = Depends(get_payments_service)):
    return service.create_payment(owner, payload)


@router.get("", response_model=GetPaymentsOutput)
@router.get("/", response_model=GetPaymentsOutput)
def get_payments(owner=Depends(require_roles("Owner")),
                 service: PaymentsService = Depends(get_payments_service)):
    return service.get_payments(owner)
