import logging
from library_ledger.models.user import MembershipType
from library_ledger.schemas.book import BookCreate
from library_ledger.schemas.user import MemberCreate, LibrarianCreate

logger = logging.getLogger(__name__)

SAMPLE_BOOKS = [
    BookCreate(isbn="978-0-596-52068-7", title="Head First Java", author="Kathy Sierra",
               category="Programming", total_copies=5, price=599.0),
    BookCreate(isbn="978-0-134-68599-1", title="Effective Java", author="Joshua Bloch",
               category="Programming", total_copies=3, price=799.0),
    BookCreate(isbn="978-0-201-63361-0", title="Design Patterns", author="Gang of Four",
               category="Software Engineering", total_copies=4, price=899.0),
    BookCreate(isbn="978-0-132-35088-4", title="Clean Code", author="Robert Martin",
               category="Software Engineering", total_copies=6, price=699.0),
    BookCreate(isbn="978-0-262-03384-8", title="Introduction to Algorithms", author="CLRS",
               category="Algorithms", total_copies=2, price=1299.0),
]

SAMPLE_USERS = [
    MemberCreate(user_id="M001", name="Alice Johnson", email="alice@email.com",
                 phone="9876543210", membership_type=MembershipType.REGULAR),
    MemberCreate(user_id="M002", name="Bob Smith", email="bob@email.com",
                 phone="9876543211", membership_type=MembershipType.PREMIUM),
    LibrarianCreate(user_id="L001", name="Carol Admin", email="carol@library.com",
                    phone="9876543212", employee_id="EMP001"),
]

def seed_sample_data(service) -> None:
    """Load the demo catalog and users into an empty service."""
    for book in SAMPLE_BOOKS:
        service.add_book(book)
    for user in SAMPLE_USERS:
        service.register_user(user)
    logger.info("Sample data initialized")
