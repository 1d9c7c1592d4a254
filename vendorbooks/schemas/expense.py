from typing import Optional
from pydantic import BaseModel, Field, UUID4
from decimal import Decimal
from datetime import date


# Expense — Create (POST /accounts/expenses)
class ExpenseCreate(BaseModel):
    date: date
    amount: Decimal = Field(gt=0)
    category: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    payment_mode: str = "cash"
    entity_id: UUID4


# Expense — response
class ExpenseOut(BaseModel):
    id: UUID4
    date: date
    amount: Decimal
    category: str
    description: Optional[str] = None
    payment_mode: str
    entity_id: Optional[UUID4] = None

    class Config:
        from_attributes = True
