from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String
from cleanlab.database import Base


class Service(Base):
    """Catalog entry a booking is made against"""
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), index=True)  # "laundry", "dry_cleaning", "special"
    base_price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    express_price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    def price_for(self, express: bool = False) -> float:
        if express and self.express_price is not None:
            return self.express_price
        return self.base_price

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "base_price": self.base_price,
            "express_price": self.express_price,
            "is_active": self.is_active,
        }
