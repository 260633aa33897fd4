import enum
from sqlalchemy import Column, String, Date, Integer, Numeric, CheckConstraint
from library_ledger.database import Base

class TransactionStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    OVERDUE = "OVERDUE"
    RETURNED = "RETURNED"

OPEN_STATUSES = (TransactionStatus.ACTIVE.value, TransactionStatus.OVERDUE.value)

class Transaction(Base):
    __tablename__ = "lending_transaction"

    seq = Column(Integer, primary_key=True)  # insertion order
    transaction_id = Column(String(20), unique=True, nullable=False, index=True)
    # Weak references, looked up through the catalog and directory at use time
    user_id = Column(String(50), nullable=False, index=True)
    isbn = Column(String(32), nullable=False, index=True)
    borrow_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    return_date = Column(Date, nullable=True)
    status = Column(String(20), default=TransactionStatus.ACTIVE.value, nullable=False, index=True)
    fine = Column(Numeric(10, 2, asdecimal=False), default=0.00, nullable=False)

    __table_args__ = (
        CheckConstraint("status IN ('ACTIVE', 'OVERDUE', 'RETURNED')", name="chk_transaction_status"),
        CheckConstraint("fine >= 0", name="chk_transaction_fine"),
    )

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES
