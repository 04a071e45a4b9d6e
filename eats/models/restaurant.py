from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from eats.db.session import Base
from eats.models.core import CoreMixin


class Category(CoreMixin, Base):
    __tablename__ = "categories"

    name = Column(String(255), nullable=False)
    cover_image = Column(String(500), nullable=True)
    slug = Column(String(255), unique=True, index=True, nullable=False)

    restaurants = relationship("Restaurant", back_populates="category")


class Restaurant(CoreMixin, Base):
    __tablename__ = "restaurants"

    name = Column(String(255), nullable=False, index=True)
    address = Column(String(500), nullable=False)
    cover_image = Column(String(500), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    is_promoted = Column(Boolean, nullable=False, default=False)
    promoted_until = Column(DateTime, nullable=True)

    category = relationship("Category", back_populates="restaurants", lazy="joined")
    owner = relationship("User", back_populates="restaurants")
    menu = relationship("Dish", back_populates="restaurant", cascade="all, delete-orphan",
                        lazy="selectin", order_by="Dish.id")
    # orders outlive their restaurant; deleting it only clears restaurant_id
    orders = relationship("Order", back_populates="restaurant")
