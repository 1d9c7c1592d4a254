import uuid
from sqlalchemy import Column, String, DateTime, func, DECIMAL, ForeignKey, Text, Date, Uuid
from sqlalchemy.orm import relationship
from vendorbooks.db.session import Base

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    vendor_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    entity_id = Column(Uuid(as_uuid=True), ForeignKey("entities.id"), nullable=True, index=True)
    client_name = Column(String(255), nullable=True)
    event_name = Column(String(255), nullable=False, default="")
    total_amount = Column(DECIMAL(12, 2), nullable=False, default=0)
    event_date = Column(Date, nullable=True, index=True)
    from_time = Column(String(8), nullable=True)  # "HH:MM"
    to_time = Column(String(8), nullable=True)    # "HH:MM"
    # Explicit flag only: active, cancelled. Confirmed/completed are derived on read.
    status = Column(String(20), default="active", nullable=False, index=True)
    notes = Column(Text, nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    entity = relationship("Entity", back_populates="bookings")
    payments = relationship("Payment", back_populates="booking", cascade="all, delete-orphan")
