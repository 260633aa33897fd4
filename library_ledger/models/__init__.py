from .user import User, UserKind, MembershipType
from .book import Book
from .transaction import Transaction, TransactionStatus, OPEN_STATUSES

__all__ = [
    "User",
    "UserKind",
    "MembershipType",
    "Book",
    "Transaction",
    "TransactionStatus",
    "OPEN_STATUSES",
]
