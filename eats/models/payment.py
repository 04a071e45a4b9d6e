from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from eats.db.session import Base
from eats.models.core import CoreMixin


class Payment(CoreMixin, Base):
    __tablename__ = "payments"

    transaction_id = Column(String(255), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)

    user = relationship("User", back_populates="payments")
    restaurant = relationship("Restaurant")
