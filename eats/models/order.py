import enum

from sqlalchemy import Column, Integer, Enum, ForeignKey
from sqlalchemy.orm import relationship

from eats.db.session import Base
from eats.models.core import CoreMixin


class OrderStatus(str, enum.Enum):
    Pending = "Pending"
    Cooking = "Cooking"
    Cooked = "Cooked"
    PickedUp = "PickedUp"
    Delivered = "Delivered"
    Canceled = "Canceled"


class Order(CoreMixin, Base):
    __tablename__ = "orders"

    customer_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    driver_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="SET NULL"), nullable=True, index=True)
    total = Column(Integer, nullable=False, default=0)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.Pending)

    customer = relationship("User", back_populates="orders", foreign_keys=[customer_id])
    driver = relationship("User", back_populates="rides", foreign_keys=[driver_id])
    # visibility checks need restaurant.owner_id on every loaded order
    restaurant = relationship("Restaurant", back_populates="orders", lazy="joined")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan",
                         lazy="selectin", order_by="OrderItem.id")
