import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from eats.core.config import settings
from eats.core.timezone_utils import utcnow
from eats.db.session import SessionLocal
from eats.models.payment import Payment
from eats.models.restaurant import Restaurant
from eats.models.user import User
from eats.schemas.payment import CreatePaymentInput, CreatePaymentOutput, GetPaymentsOutput, PaymentRead

logger = logging.getLogger("eats.payments")


class PaymentsService:
    def __init__(self, db: Session, promotion_days: int = None):
        self.db = db
        self.promotion_days = promotion_days or settings.PROMOTION_DAYS

    def create_payment(self, owner: User, data: CreatePaymentInput) -> CreatePaymentOutput:
        try:
            restaurant = self.db.query(Restaurant).filter(Restaurant.id == data.restaurant_id).first()
            if restaurant is None:
                return CreatePaymentOutput(ok=False, error="Restaurant not found")
            if restaurant.owner_id != owner.id:
                return CreatePaymentOutput(ok=False, error="Unauthorized request")

            restaurant.is_promoted = True
            restaurant.promoted_until = utcnow() + timedelta(days=self.promotion_days)
            self.db.add(restaurant)
            self.db.add(Payment(transaction_id=data.transaction_id, user_id=owner.id, restaurant_id=restaurant.id))
            self.db.commit()
            logger.info(f"restaurant {restaurant.id} promoted until {restaurant.promoted_until.isoformat()}")
            return CreatePaymentOutput(ok=True)
        except Exception:
            self.db.rollback()
            logger.exception("create_payment failed")
            return CreatePaymentOutput(ok=False, error="Could not create a payment")

    def get_payments(self, user: User) -> GetPaymentsOutput:
        try:
            payments = self.db.query(Payment).filter(Payment.user_id == user.id).order_by(Payment.id.asc()).all()
            return GetPaymentsOutput(ok=True, payments=[PaymentRead.model_validate(p) for p in payments])
        except Exception:
            logger.exception("get_payments failed")
            return GetPaymentsOutput(ok=False, error="Could not find a payment")

    def check_promoted_restaurants(self) -> int:
        """Clear expired promotions; returns how many restaurants were demoted."""
        expired = (
            self.db.query(Restaurant)
            .filter(Restaurant.is_promoted.is_(True), Restaurant.promoted_until < utcnow())
            .all()
        )
        for restaurant in expired:
            restaurant.is_promoted = False
            restaurant.promoted_until = None
            self.db.add(restaurant)
        self.db.commit()
        if expired:
            logger.info(f"promotion sweep demoted {len(expired)} restaurant(s)")
        return len(expired)


def run_promotion_sweep(session_factory=None) -> int:
    """Daily job entry point: owns its own session, never shares a request's."""
    db = (session_factory or SessionLocal)()
    try:
        return PaymentsService(db).check_promoted_restaurants()
    finally:
        db.close()
