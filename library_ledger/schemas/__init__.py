from .book import BookBase, BookCreate, BookUpdate, BookResponse
from .user import UserBase, MemberCreate, LibrarianCreate, UserCreate, UserResponse
from .transaction import TransactionResponse

__all__ = [
    "BookBase", "BookCreate", "BookUpdate", "BookResponse",
    "UserBase", "MemberCreate", "LibrarianCreate", "UserCreate", "UserResponse",
    "TransactionResponse",
]
