# barberbook/models/service.py
"""
Service Model - what a customer books
Duration is the only attribute the booking engine schedules against.
"""
from sqlalchemy import Column, String, Numeric, Integer, Boolean, DateTime, Text, Uuid
from sqlalchemy.sql import func
import uuid
from barberbook.models.base import Base


class Service(Base):
    __tablename__ = "services"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    duration_minutes = Column(Integer, nullable=False)

    is_active = Column(Boolean, default=True, index=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "price": float(self.price) if self.price is not None else None,
            "duration_minutes": self.duration_minutes,
            "is_active": self.is_active,
        }

    @property
    def formatted_price(self) -> str:
        """Return human-readable price string"""
        if self.price is None:
            return "Sob consulta"
        return f"R$ {self.price:.2f}"

    @property
    def formatted_duration(self) -> str:
        """Return human-readable duration string"""
        hours = self.duration_minutes // 60
        minutes = self.duration_minutes % 60

        if hours > 0 and minutes > 0:
            return f"{hours}h {minutes}m"
        elif hours > 0:
            return f"{hours}h"
        else:
            return f"{minutes}m"
