import uuid
from sqlalchemy import Column, String, Boolean, DateTime, func, Text, Uuid
from sqlalchemy.orm import relationship
from vendorbooks.db.session import Base

class Entity(Base):
    """A venue/branch used to scope a multi-location vendor's data."""
    __tablename__ = "entities"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    vendor_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    bookings = relationship("Booking", back_populates="entity")
    expenses = relationship("Expense", back_populates="entity")
