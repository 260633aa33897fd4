import logging
from typing import List
from sqlalchemy.orm import Session
from library_ledger.config import Settings
from library_ledger.errors import ErrorKind, LendingError
from library_ledger.models.user import User, UserKind, MembershipType
from library_ledger.schemas.user import UserCreate, MemberCreate, LibrarianCreate, UserResponse

logger = logging.getLogger(__name__)


class Directory:
    """Registered users (members and librarians) keyed by user id."""

    def __init__(self, session: Session, settings: Settings):
        self.session = session
        # (kind, membership type) -> max simultaneous loans
        self._limits = {
            (UserKind.MEMBER.value, MembershipType.REGULAR.value): settings.max_books_regular,
            (UserKind.MEMBER.value, MembershipType.PREMIUM.value): settings.max_books_premium,
            (UserKind.LIBRARIAN.value, None): settings.max_books_librarian,
        }

    def register(self, user_data: UserCreate) -> User:
        if self.session.get(User, user_data.user_id) is not None:
            raise LendingError(
                ErrorKind.DUPLICATE_ENTITY,
                f"User with ID {user_data.user_id} already exists"
            )

        user = User(
            user_id=user_data.user_id,
            kind=user_data.kind,
            name=user_data.name,
            email=str(user_data.email),
            phone=user_data.phone,
        )
        if isinstance(user_data, MemberCreate):
            user.membership_type = user_data.membership_type.value
        elif isinstance(user_data, LibrarianCreate):
            user.employee_id = user_data.employee_id
        else:
            raise TypeError(f"Unsupported user variant: {type(user_data).__name__}")

        self.session.add(user)
        self.session.flush()
        logger.info(f"User registered: {user.name}")
        return user

    def get(self, user_id: str) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise LendingError(ErrorKind.NOT_FOUND, f"User with ID {user_id} not found")
        return user

    def all(self) -> List[User]:
        return self.session.query(User).order_by(User.user_id).all()

    def max_books_allowed(self, user: User) -> int:
        key = (user.kind, user.membership_type if user.kind == UserKind.MEMBER.value else None)
        try:
            return self._limits[key]
        except KeyError:
            raise ValueError(f"No borrowing limit defined for user variant {key}") from None

    def snapshot(self, user: User) -> UserResponse:
        return UserResponse(
            user_id=user.user_id,
            kind=user.kind,
            name=user.name,
            email=user.email,
            phone=user.phone,
            membership_type=user.membership_type,
            employee_id=user.employee_id,
            max_books_allowed=self.max_books_allowed(user),
        )
