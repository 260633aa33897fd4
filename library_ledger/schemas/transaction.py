from pydantic import BaseModel
from typing import Optional
from datetime import date
from library_ledger.models.transaction import TransactionStatus

class TransactionResponse(BaseModel):
    transaction_id: str
    user_id: str
    isbn: str
    borrow_date: date
    due_date: date
    return_date: Optional[date] = None
    status: TransactionStatus
    fine: float

    class Config:
        from_attributes = True
