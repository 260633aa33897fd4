"""Lending service: borrow/return orchestration over catalog, directory and ledger.

Every public call runs under one re-entrant lock and one unit of work.  Checks
happen before any mutation, and any failure rolls the session back, so a
failed call leaves catalog counters and the ledger exactly as they were.
Callers receive pydantic snapshots, never live ORM rows.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import date
from functools import partial
from typing import Callable, Dict, Iterator, List, Optional
from sqlalchemy.engine import Engine
from library_ledger.config import Settings, settings as default_settings
from library_ledger.database import build_engine, init_db, create_session
from library_ledger.errors import ErrorKind, LendingError
from library_ledger.models.transaction import TransactionStatus
from library_ledger.schemas.book import BookCreate, BookUpdate, BookResponse
from library_ledger.schemas.user import UserCreate, UserResponse
from library_ledger.schemas.transaction import TransactionResponse
from library_ledger.services.catalog import Catalog
from library_ledger.services.directory import Directory
from library_ledger.services.ledger import Ledger
from library_ledger.utils.timezone import today_local

logger = logging.getLogger(__name__)


class LendingService:

    def __init__(
        self,
        settings: Optional[Settings] = None,
        engine: Optional[Engine] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.settings = settings or default_settings
        self.engine = engine or build_engine(self.settings.database_url)
        init_db(self.engine)
        self.session = create_session(self.engine)
        if today is None:
            today = partial(today_local, self.settings.timezone)

        self.catalog = Catalog(self.session)
        self.directory = Directory(self.session, self.settings)
        self.ledger = Ledger(self.session, self.settings, today)
        self._lock = threading.RLock()

    def close(self) -> None:
        with self._lock:
            self.session.close()
            self.engine.dispose()

    @contextmanager
    def _unit_of_work(self, action: str) -> Iterator[None]:
        with self._lock:
            try:
                yield
                self.session.commit()
            except LendingError as e:
                self.session.rollback()
                logger.warning(f"{action} failed [{e.kind.value}]: {e.detail}")
                raise
            except Exception as e:
                self.session.rollback()
                logger.error(f"{action} failed: {e}", exc_info=True)
                raise

    # Book management
    def add_book(self, book_data: BookCreate) -> BookResponse:
        with self._unit_of_work("add book"):
            book = self.catalog.add(book_data)
            return BookResponse.model_validate(book)

    def get_book(self, isbn: str) -> BookResponse:
        with self._unit_of_work("get book"):
            return BookResponse.model_validate(self.catalog.get(isbn))

    def update_book(self, isbn: str, book_data: BookUpdate) -> BookResponse:
        with self._unit_of_work("update book"):
            return BookResponse.model_validate(self.catalog.update(isbn, book_data))

    def set_total_copies(self, isbn: str, total_copies: int) -> BookResponse:
        with self._unit_of_work("set total copies"):
            return BookResponse.model_validate(self.catalog.set_total_copies(isbn, total_copies))

    def remove_book(self, isbn: str) -> None:
        with self._unit_of_work("remove book"):
            self.catalog.remove(isbn)

    def list_books(self) -> List[BookResponse]:
        with self._unit_of_work("list books"):
            return [BookResponse.model_validate(book) for book in self.catalog.all()]

    def search_books(self, keyword: str) -> List[BookResponse]:
        with self._unit_of_work("search books"):
            return [BookResponse.model_validate(book) for book in self.catalog.search(keyword)]

    # User management
    def register_user(self, user_data: UserCreate) -> UserResponse:
        with self._unit_of_work("register user"):
            return self.directory.snapshot(self.directory.register(user_data))

    def get_user(self, user_id: str) -> UserResponse:
        with self._unit_of_work("get user"):
            return self.directory.snapshot(self.directory.get(user_id))

    def list_users(self) -> List[UserResponse]:
        with self._unit_of_work("list users"):
            return [self.directory.snapshot(user) for user in self.directory.all()]

    # Transactions
    def borrow(self, user_id: str, isbn: str) -> TransactionResponse:
        with self._unit_of_work("borrow"):
            user = self.directory.get(user_id)
            book = self.catalog.get(isbn)

            if book.available_copies <= 0:
                raise LendingError(
                    ErrorKind.UNAVAILABLE,
                    f"Book '{book.title}' ({isbn}) is not available for borrowing"
                )

            limit = self.directory.max_books_allowed(user)
            if self._loan_count(user_id) >= limit:
                raise LendingError(
                    ErrorKind.LIMIT_EXCEEDED,
                    f"User {user_id} has reached maximum borrowing limit ({limit})"
                )

            transaction = self.ledger.record(self.ledger.open(user_id, isbn))
            book.borrow_copy()
            logger.info(f"Book borrowed: {isbn} by {user_id} ({transaction.transaction_id}, due {transaction.due_date})")
            return TransactionResponse.model_validate(transaction)

    def return_book(self, transaction_id: str) -> TransactionResponse:
        with self._unit_of_work("return"):
            transaction = self.ledger.find(transaction_id)
            if transaction.status == TransactionStatus.RETURNED.value:
                raise LendingError(
                    ErrorKind.INVALID_STATE,
                    f"Book already returned for transaction {transaction_id}"
                )

            book = self.catalog.get(transaction.isbn)
            self.ledger.settle(transaction)
            book.return_copy()
            logger.info(f"Book returned: transaction {transaction_id}, fine {transaction.fine:.2f}")
            return TransactionResponse.model_validate(transaction)

    def get_transaction(self, transaction_id: str) -> TransactionResponse:
        with self._unit_of_work("get transaction"):
            transaction = self.ledger.find(transaction_id)
            self.ledger.refresh_overdue(transaction)
            return TransactionResponse.model_validate(transaction)

    def user_transactions(self, user_id: str) -> List[TransactionResponse]:
        with self._unit_of_work("user transactions"):
            self.directory.get(user_id)
            transactions = self.ledger.for_user(user_id)
            for transaction in transactions:
                self.ledger.refresh_overdue(transaction)
            return [TransactionResponse.model_validate(t) for t in transactions]

    def active_transactions(self) -> List[TransactionResponse]:
        with self._unit_of_work("active transactions"):
            self.ledger.refresh_all_overdue()
            return [TransactionResponse.model_validate(t) for t in self.ledger.active()]

    def refresh_overdue(self) -> int:
        """Sweep open loans and mark those past due; returns how many changed."""
        with self._unit_of_work("refresh overdue"):
            return self.ledger.refresh_all_overdue()

    # Analytics
    def counts_by_category(self) -> Dict[str, int]:
        with self._unit_of_work("counts by category"):
            return self.catalog.count_by_category()

    def most_borrowed(self, limit: int) -> List[BookResponse]:
        if limit <= 0:
            return []
        with self._unit_of_work("most borrowed"):
            books = []
            for isbn, _ in self.ledger.count_by_isbn()[:limit]:
                book = self.catalog.find(isbn)
                if book is not None:
                    books.append(BookResponse.model_validate(book))
            return books

    def total_fines_collected(self) -> float:
        with self._unit_of_work("total fines"):
            return self.ledger.total_fines()

    def _loan_count(self, user_id: str) -> int:
        for transaction in self.ledger.for_user(user_id):
            if transaction.is_open:
                self.ledger.refresh_overdue(transaction)
        if self.settings.count_overdue_toward_limit:
            return self.ledger.outstanding_count_for(user_id)
        return self.ledger.active_count_for(user_id)
