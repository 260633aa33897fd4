# tests/conftest.py
import pytest
from datetime import date, timedelta

from library_ledger.config import Settings
from library_ledger.models.user import MembershipType
from library_ledger.schemas.book import BookCreate
from library_ledger.schemas.user import MemberCreate, LibrarianCreate
from library_ledger.services.lending import LendingService


class FrozenClock:
    """Stand-in for today's date that tests move forward by hand."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int) -> None:
        self.today += timedelta(days=days)


@pytest.fixture
def settings():
    """Settings with the stock lending policy, independent of any .env file."""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        loan_period_days=14,
        fine_per_day=5.0,
        max_books_regular=5,
        max_books_premium=10,
        max_books_librarian=20,
        count_overdue_toward_limit=True,
        seed_sample_data=False,
    )

@pytest.fixture
def clock():
    return FrozenClock(date(2024, 3, 1))

@pytest.fixture
def service(settings, clock):
    """A lending service over its own in-memory database."""
    svc = LendingService(settings, today=clock)
    yield svc
    svc.close()

@pytest.fixture
def sample_book(service):
    return service.add_book(BookCreate(
        isbn="978-0-132-35088-4",
        title="Clean Code",
        author="Robert Martin",
        category="Software Engineering",
        total_copies=3,
        price=699.0,
    ))

@pytest.fixture
def single_copy_book(service):
    return service.add_book(BookCreate(
        isbn="978-0-262-03384-8",
        title="Introduction to Algorithms",
        author="CLRS",
        category="Algorithms",
        total_copies=1,
        price=1299.0,
    ))

@pytest.fixture
def regular_member(service):
    return service.register_user(MemberCreate(
        user_id="M001",
        name="Alice Johnson",
        email="alice@email.com",
        phone="9876543210",
        membership_type=MembershipType.REGULAR,
    ))

@pytest.fixture
def premium_member(service):
    return service.register_user(MemberCreate(
        user_id="M002",
        name="Bob Smith",
        email="bob@email.com",
        phone="9876543211",
        membership_type=MembershipType.PREMIUM,
    ))

@pytest.fixture
def librarian(service):
    return service.register_user(LibrarianCreate(
        user_id="L001",
        name="Carol Admin",
        email="carol@library.com",
        phone="9876543212",
        employee_id="EMP001",
    ))

@pytest.fixture
def many_books(service):
    """Twelve single-copy books for borrow-limit tests."""
    books = []
    for i in range(1, 13):
        books.append(service.add_book(BookCreate(
            isbn=f"ISBN-{i:03d}",
            title=f"Test Book {i}",
            author=f"Test Author {i}",
            category="Testing",
            total_copies=1,
        )))
    return books
