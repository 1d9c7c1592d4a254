import uuid
from sqlalchemy import Column, String, DateTime, func, DECIMAL, ForeignKey, Text, Date, Uuid
from sqlalchemy.orm import relationship
from vendorbooks.db.session import Base

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    vendor_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    entity_id = Column(Uuid(as_uuid=True), ForeignKey("entities.id"), nullable=True, index=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(DECIMAL(12, 2), nullable=False)
    category = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    payment_mode = Column(String(30), nullable=False, default="cash")
    receipt_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    entity = relationship("Entity", back_populates="expenses")
