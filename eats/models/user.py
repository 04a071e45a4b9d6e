import enum
import uuid

from sqlalchemy import Column, Integer, String, Enum, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from eats.db.session import Base
from eats.models.core import CoreMixin


class UserRole(str, enum.Enum):
    Client = "Client"
    Owner = "Owner"
    Delivery = "Delivery"


class User(CoreMixin, Base):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    # passlib hash; plain passwords never reach this column
    password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.Client)
    verified = Column(Boolean, nullable=False, default=False)

    restaurants = relationship("Restaurant", back_populates="owner", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="customer", foreign_keys="Order.customer_id")
    rides = relationship("Order", back_populates="driver", foreign_keys="Order.driver_id")
    payments = relationship("Payment", back_populates="user")

    def __repr__(self):
        return f"<User id={self.id} role={self.role}>"


def _new_code():
    return uuid.uuid4().hex


class Verification(CoreMixin, Base):
    __tablename__ = "verifications"

    code = Column(String(64), unique=True, nullable=False, default=_new_code)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    user = relationship("User", lazy="joined")
