import uuid
from sqlalchemy import Column, String, DateTime, func, DECIMAL, ForeignKey, Text, Date, Uuid
from sqlalchemy.orm import relationship
from vendorbooks.db.session import Base

class Payment(Base):
    __tablename__ = "payments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    vendor_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    booking_id = Column(Uuid(as_uuid=True), ForeignKey("bookings.id"), nullable=False, index=True)
    amount = Column(DECIMAL(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False, index=True)
    payment_type = Column(String(20), nullable=False, default="full")  # full, partial, advance, overpaid, refund
    refund_amount = Column(DECIMAL(12, 2), nullable=True)  # refunds only
    payment_method = Column(String(30), nullable=False, default="cash")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    booking = relationship("Booking", back_populates="payments")

    @property
    def entity_id(self):
        """Entity of the owning booking; payments are scoped through it."""
        return self.booking.entity_id if self.booking else None
