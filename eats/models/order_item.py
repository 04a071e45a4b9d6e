from sqlalchemy import Column, Integer, ForeignKey, JSON
from sqlalchemy.orm import relationship

from eats.db.session import Base
from eats.models.core import CoreMixin


class OrderItem(CoreMixin, Base):
    __tablename__ = "order_items"

    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    dish_id = Column(Integer, ForeignKey("dishes.id", ondelete="CASCADE"), nullable=False)
    # choices selected by the customer: [{"name": option name, "choice": choice name?}]
    choices = Column(JSON, nullable=True)

    order = relationship("Order", back_populates="items")
    dish = relationship("Dish", lazy="joined")
