"""Append-only record of borrow/return transactions.

The ledger owns transaction state: ACTIVE at creation, OVERDUE once the
current date passes the due date, RETURNED (terminal) when settled.  Fines
are computed only at settlement and never change afterwards.
"""

import logging
from datetime import date, timedelta
from typing import Callable, List
from sqlalchemy import func
from sqlalchemy.orm import Session
from library_ledger.config import Settings
from library_ledger.errors import ErrorKind, LendingError
from library_ledger.models.transaction import Transaction, TransactionStatus, OPEN_STATUSES
from library_ledger.utils.timezone import today_local

logger = logging.getLogger(__name__)

TRANSACTION_ID_FORMAT = "TXN{:06d}"


class Ledger:

    def __init__(self, session: Session, settings: Settings, today: Callable[[], date] = today_local):
        self.session = session
        self.settings = settings
        self.today = today

    def next_transaction_id(self) -> str:
        # Transactions are never deleted, so the row count only grows
        count = self.session.query(func.count(Transaction.seq)).scalar() or 0
        return TRANSACTION_ID_FORMAT.format(count + 1)

    def open(self, user_id: str, isbn: str) -> Transaction:
        """Build a new ACTIVE transaction dated today; not recorded until ``record``."""
        borrow_date = self.today()
        return Transaction(
            transaction_id=self.next_transaction_id(),
            user_id=user_id,
            isbn=isbn,
            borrow_date=borrow_date,
            due_date=borrow_date + timedelta(days=self.settings.loan_period_days),
            status=TransactionStatus.ACTIVE.value,
            fine=0.0,
        )

    def record(self, transaction: Transaction) -> Transaction:
        self.session.add(transaction)
        self.session.flush()
        return transaction

    def find(self, transaction_id: str) -> Transaction:
        transaction = self.session.query(Transaction).filter(
            Transaction.transaction_id == transaction_id
        ).first()
        if transaction is None:
            raise LendingError(ErrorKind.NOT_FOUND, f"Transaction {transaction_id} not found")
        return transaction

    def active_count_for(self, user_id: str) -> int:
        """Number of the user's loans in ACTIVE state (OVERDUE loans excluded)."""
        return self.session.query(func.count(Transaction.seq)).filter(
            Transaction.user_id == user_id,
            Transaction.status == TransactionStatus.ACTIVE.value
        ).scalar()

    def outstanding_count_for(self, user_id: str) -> int:
        """Number of the user's loans still out, ACTIVE or OVERDUE."""
        return self.session.query(func.count(Transaction.seq)).filter(
            Transaction.user_id == user_id,
            Transaction.status.in_(OPEN_STATUSES)
        ).scalar()

    def for_user(self, user_id: str) -> List[Transaction]:
        return self.session.query(Transaction).filter(
            Transaction.user_id == user_id
        ).order_by(Transaction.seq).all()

    def active(self) -> List[Transaction]:
        return self.session.query(Transaction).filter(
            Transaction.status.in_(OPEN_STATUSES)
        ).order_by(Transaction.seq).all()

    def refresh_overdue(self, transaction: Transaction) -> bool:
        """Move an ACTIVE transaction past its due date to OVERDUE. Returns True on transition."""
        if transaction.status == TransactionStatus.ACTIVE.value and self.today() > transaction.due_date:
            transaction.status = TransactionStatus.OVERDUE.value
            self.session.flush()
            logger.info(f"Transaction {transaction.transaction_id} is overdue (due {transaction.due_date})")
            return True
        return False

    def refresh_all_overdue(self) -> int:
        overdue = 0
        for transaction in self.active():
            if self.refresh_overdue(transaction):
                overdue += 1
        return overdue

    def settle(self, transaction: Transaction) -> Transaction:
        if transaction.status == TransactionStatus.RETURNED.value:
            raise LendingError(
                ErrorKind.INVALID_STATE,
                f"Transaction {transaction.transaction_id} already returned"
            )

        return_date = self.today()
        transaction.return_date = return_date
        transaction.status = TransactionStatus.RETURNED.value
        transaction.fine = self.fine_for(transaction.due_date, return_date)
        self.session.flush()
        return transaction

    def fine_for(self, due_date: date, return_date: date) -> float:
        days_overdue = (return_date - due_date).days
        return max(0, days_overdue) * self.settings.fine_per_day

    def count_by_isbn(self):
        """(isbn, transaction count) pairs, most borrowed first, ties by ISBN."""
        borrow_count = func.count(Transaction.seq).label("borrow_count")
        return self.session.query(Transaction.isbn, borrow_count).group_by(
            Transaction.isbn
        ).order_by(borrow_count.desc(), Transaction.isbn.asc()).all()

    def total_fines(self) -> float:
        total = self.session.query(func.coalesce(func.sum(Transaction.fine), 0)).filter(
            Transaction.status == TransactionStatus.RETURNED.value
        ).scalar()
        return float(total)
