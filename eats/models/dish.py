from sqlalchemy import Column, Integer, String, ForeignKey, JSON
from sqlalchemy.orm import relationship

from eats.db.session import Base
from eats.models.core import CoreMixin


class Dish(CoreMixin, Base):
    __tablename__ = "dishes"

    name = Column(String(255), nullable=False)
    # smallest currency unit, integer arithmetic only
    price = Column(Integer, nullable=False)
    photo = Column(String(500), nullable=True)
    description = Column(String(140), nullable=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)
    # [{"name": str, "extra": int?, "choices": [{"name": str, "extra": int?}]?}]
    options = Column(JSON, nullable=True)

    restaurant = relationship("Restaurant", back_populates="menu")
