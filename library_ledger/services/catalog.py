import logging
from typing import Dict, List, Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from library_ledger.errors import ErrorKind, LendingError
from library_ledger.models.book import Book
from library_ledger.schemas.book import BookCreate, BookUpdate

logger = logging.getLogger(__name__)


class Catalog:
    """Book records keyed by ISBN, including the available-copy counters."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, book_data: BookCreate) -> Book:
        if self.find(book_data.isbn) is not None:
            raise LendingError(
                ErrorKind.DUPLICATE_ENTITY,
                f"Book with ISBN {book_data.isbn} already exists"
            )

        book = Book(
            isbn=book_data.isbn,
            title=book_data.title,
            author=book_data.author,
            category=book_data.category,
            total_copies=book_data.total_copies,
            available_copies=book_data.total_copies,
            price=book_data.price,
        )
        self.session.add(book)
        self.session.flush()
        logger.info(f"Book added: {book.title}")
        return book

    def find(self, isbn: str) -> Optional[Book]:
        return self.session.get(Book, isbn)

    def get(self, isbn: str) -> Book:
        book = self.find(isbn)
        if book is None:
            raise LendingError(ErrorKind.NOT_FOUND, f"Book with ISBN {isbn} not found")
        return book

    def update(self, isbn: str, book_data: BookUpdate) -> Book:
        """Replace an existing record, carrying the copies on loan across the new total."""
        book = self.get(isbn)
        self._check_capacity(book, book_data.total_copies)

        on_loan = book.copies_on_loan
        book.title = book_data.title
        book.author = book_data.author
        book.category = book_data.category
        book.price = book_data.price
        book.total_copies = book_data.total_copies
        book.available_copies = book_data.total_copies - on_loan
        self.session.flush()
        logger.info(f"Book updated: {isbn}")
        return book

    def set_total_copies(self, isbn: str, total_copies: int) -> Book:
        book = self.get(isbn)
        self._check_capacity(book, total_copies)

        difference = total_copies - book.total_copies
        book.total_copies = total_copies
        book.available_copies += difference
        self.session.flush()
        logger.info(f"Book {isbn} capacity set to {total_copies}")
        return book

    def remove(self, isbn: str) -> None:
        book = self.get(isbn)
        if book.copies_on_loan > 0:
            raise LendingError(
                ErrorKind.INVALID_STATE,
                f"Book with ISBN {isbn} has {book.copies_on_loan} copies on loan"
            )
        self.session.delete(book)
        self.session.flush()
        logger.info(f"Book removed: {isbn}")

    def all(self) -> List[Book]:
        return self.session.query(Book).order_by(Book.isbn).all()

    def search(self, keyword: str) -> List[Book]:
        """Case-insensitive substring match on title, author or category."""
        # Escape LIKE wildcards so the keyword is matched literally
        escaped = keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        search_term = f"%{escaped}%"
        return self.session.query(Book).filter(
            or_(
                Book.title.ilike(search_term, escape="\\"),
                Book.author.ilike(search_term, escape="\\"),
                Book.category.ilike(search_term, escape="\\")
            )
        ).order_by(Book.title).all()

    def count_by_category(self) -> Dict[str, int]:
        rows = self.session.query(Book.category, func.count(Book.isbn)).group_by(Book.category).all()
        return {category: count for category, count in rows}

    @staticmethod
    def _check_capacity(book: Book, total_copies: int) -> None:
        if total_copies < 0:
            raise LendingError(ErrorKind.INVALID_ARGUMENT, "Total copies cannot be negative")
        if total_copies < book.copies_on_loan:
            raise LendingError(
                ErrorKind.INVALID_ARGUMENT,
                f"Cannot reduce total copies below borrowed amount ({book.copies_on_loan})"
            )
