"""Interactive console menu over the lending service."""

import click
from pydantic import ValidationError
from library_ledger.errors import LendingError
from library_ledger.models.user import MembershipType
from library_ledger.schemas.book import BookCreate, BookUpdate
from library_ledger.schemas.user import MemberCreate, LibrarianCreate
from library_ledger.services.lending import LendingService
from library_ledger.utils.validators import is_valid_email, is_valid_isbn, is_valid_phone

RULE = "=" * 40


def truncate(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return value[:max_length - 3] + "..."


def format_validation_error(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()
    )


class LibraryConsole:
    """Menu-driven front end; every action catches and reports core errors."""

    def __init__(self, service: LendingService):
        self.service = service

    def run(self) -> None:
        click.echo(RULE)
        click.echo("  LIBRARY MANAGEMENT SYSTEM")
        click.echo(RULE)

        menus = {
            1: self.book_menu,
            2: self.user_menu,
            3: self.transaction_menu,
            4: self.show_analytics,
        }
        while True:
            click.echo("\n========== MAIN MENU ==========")
            click.echo("1. Book Management")
            click.echo("2. User Management")
            click.echo("3. Transaction Management")
            click.echo("4. View Analytics")
            click.echo("5. Exit")
            choice = click.prompt("Enter your choice", type=int)
            if choice == 5:
                click.echo("Thank you for using Library Management System!")
                return
            handler = menus.get(choice)
            if handler is None:
                click.echo("Invalid choice. Please try again.")
                continue
            self._guarded(handler)

    def _guarded(self, action) -> None:
        try:
            action()
        except LendingError as e:
            click.echo(f"Error: {e}")
        except ValidationError as e:
            click.echo(f"Error: {format_validation_error(e)}")

    def _submenu(self, title: str, actions) -> None:
        click.echo(f"\n----- {title} -----")
        for number, (label, _) in enumerate(actions, start=1):
            click.echo(f"{number}. {label}")
        click.echo(f"{len(actions) + 1}. Back to Main Menu")
        choice = click.prompt("Enter choice", type=int)
        if choice == len(actions) + 1:
            return
        if 1 <= choice <= len(actions):
            actions[choice - 1][1]()
        else:
            click.echo("Invalid choice")

    # Books
    def book_menu(self) -> None:
        self._submenu("Book Management", [
            ("Add Book", self.add_book),
            ("View All Books", self.view_books),
            ("Search Books", self.search_books),
            ("Update Book", self.update_book),
            ("Remove Book", self.remove_book),
        ])

    def add_book(self) -> None:
        click.echo("\n--- Add New Book ---")
        isbn = click.prompt("Enter ISBN").strip()
        if not is_valid_isbn(isbn):
            click.echo("Invalid ISBN format.")
            return
        book = BookCreate(
            isbn=isbn,
            title=click.prompt("Enter Title").strip(),
            author=click.prompt("Enter Author").strip(),
            category=click.prompt("Enter Category", default="", show_default=False).strip(),
            total_copies=click.prompt("Enter Total Copies", type=int),
            price=click.prompt("Enter Price", type=float),
        )
        self.service.add_book(book)
        click.echo("Book added successfully!")

    def view_books(self) -> None:
        click.echo("\n--- All Books ---")
        books = self.service.list_books()
        if not books:
            click.echo("No books available.")
            return
        click.echo(f"{'ISBN':<20} {'Title':<30} {'Author':<25} {'Category':<20} {'Available':<10} {'Total':<10}")
        click.echo("-" * 120)
        for book in books:
            click.echo(
                f"{book.isbn:<20} {truncate(book.title, 30):<30} {truncate(book.author, 25):<25} "
                f"{truncate(book.category, 20):<20} {book.available_copies:<10} {book.total_copies:<10}"
            )

    def search_books(self) -> None:
        keyword = click.prompt("Enter search keyword").strip()
        results = self.service.search_books(keyword)
        click.echo("\n--- Search Results ---")
        if not results:
            click.echo(f"No books found matching: {keyword}")
            return
        for book in results:
            click.echo(
                f"{book.isbn}  {book.title} by {book.author} "
                f"[{book.category}] available {book.available_copies}/{book.total_copies}"
            )

    def update_book(self) -> None:
        isbn = click.prompt("Enter ISBN of book to update").strip()
        book = self.service.get_book(isbn)
        click.echo(f"Current details: {book.title} by {book.author} [{book.category}]")
        click.echo("Enter new details (press Enter to keep current value):")
        updated = BookUpdate(
            title=click.prompt("New Title", default=book.title).strip(),
            author=click.prompt("New Author", default=book.author).strip(),
            category=click.prompt("New Category", default=book.category).strip(),
            total_copies=click.prompt("New Total Copies", default=book.total_copies, type=int),
            price=click.prompt("New Price", default=book.price, type=float),
        )
        self.service.update_book(isbn, updated)
        click.echo("Book updated successfully!")

    def remove_book(self) -> None:
        isbn = click.prompt("Enter ISBN of book to remove").strip()
        self.service.remove_book(isbn)
        click.echo("Book removed successfully!")

    # Users
    def user_menu(self) -> None:
        self._submenu("User Management", [
            ("Register New User", self.register_user),
            ("View All Users", self.view_users),
            ("View User Transactions", self.view_user_transactions),
        ])

    def register_user(self) -> None:
        click.echo("\n--- Register New User ---")
        user_id = click.prompt("Enter User ID").strip()
        name = click.prompt("Enter Name").strip()
        email = click.prompt("Enter Email").strip()
        if not is_valid_email(email):
            click.echo("Invalid email format.")
            return
        phone = click.prompt("Enter Phone").strip()
        if not is_valid_phone(phone):
            click.echo("Invalid phone number. Expected 10 digits.")
            return

        click.echo("Select User Type:")
        click.echo("1. Member")
        click.echo("2. Librarian")
        user_type = click.prompt("Enter choice", type=click.IntRange(1, 2))
        if user_type == 1:
            click.echo("Select Membership Type:")
            click.echo("1. REGULAR")
            click.echo("2. PREMIUM")
            membership = click.prompt("Enter choice", type=click.IntRange(1, 2))
            user = MemberCreate(
                user_id=user_id, name=name, email=email, phone=phone,
                membership_type=MembershipType.PREMIUM if membership == 2 else MembershipType.REGULAR,
            )
        else:
            employee_id = click.prompt("Enter Employee ID").strip()
            user = LibrarianCreate(user_id=user_id, name=name, email=email, phone=phone, employee_id=employee_id)

        self.service.register_user(user)
        click.echo("User registered successfully!")

    def view_users(self) -> None:
        click.echo("\n--- All Users ---")
        users = self.service.list_users()
        if not users:
            click.echo("No users registered.")
            return
        for user in users:
            detail = user.membership_type.value if user.membership_type else f"employee {user.employee_id}"
            click.echo(
                f"{user.user_id}  {user.name} <{user.email}> {user.kind.value} ({detail}), "
                f"max books {user.max_books_allowed}"
            )

    def view_user_transactions(self) -> None:
        user_id = click.prompt("Enter User ID").strip()
        transactions = self.service.user_transactions(user_id)
        click.echo("\n--- User Transactions ---")
        if not transactions:
            click.echo(f"No transactions found for user: {user_id}")
            return
        for txn in transactions:
            click.echo(f"{txn.transaction_id}  book {txn.isbn}  {txn.status.value}  due {txn.due_date}")
            if txn.fine > 0:
                click.echo(f"  Fine: Rs. {txn.fine:.2f}")

    # Transactions
    def transaction_menu(self) -> None:
        self._submenu("Transaction Management", [
            ("Borrow Book", self.borrow_book),
            ("Return Book", self.return_book),
            ("View Active Transactions", self.view_active_transactions),
        ])

    def borrow_book(self) -> None:
        user_id = click.prompt("Enter User ID").strip()
        isbn = click.prompt("Enter Book ISBN").strip()
        txn = self.service.borrow(user_id, isbn)
        click.echo("Book borrowed successfully!")
        click.echo(f"Transaction ID: {txn.transaction_id}")
        click.echo(f"Due Date: {txn.due_date}")

    def return_book(self) -> None:
        transaction_id = click.prompt("Enter Transaction ID").strip()
        txn = self.service.return_book(transaction_id)
        click.echo("Book returned successfully!")
        if txn.fine > 0:
            click.echo(f"Fine Amount: Rs. {txn.fine:.2f}")
        else:
            click.echo("No fine applicable.")

    def view_active_transactions(self) -> None:
        click.echo("\n--- Active Transactions ---")
        transactions = self.service.active_transactions()
        if not transactions:
            click.echo("No active transactions.")
            return
        for txn in transactions:
            click.echo(
                f"{txn.transaction_id}  user {txn.user_id}  book {txn.isbn}  "
                f"{txn.status.value}  due {txn.due_date}"
            )

    # Analytics
    def show_analytics(self) -> None:
        click.echo("\n========== ANALYTICS ==========")

        click.echo("\n1. Books by Category:")
        for category, count in sorted(self.service.counts_by_category().items()):
            click.echo(f"   {category or '(uncategorized)'}: {count} books")

        click.echo("\n2. Top 5 Most Borrowed Books:")
        for rank, book in enumerate(self.service.most_borrowed(5), start=1):
            click.echo(f"   {rank}. {book.title} by {book.author}")

        click.echo("\n3. Total Fines Collected:")
        click.echo(f"   Rs. {self.service.total_fines_collected():.2f}")
        click.echo("\n" + "=" * 32)
