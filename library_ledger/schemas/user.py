from pydantic import BaseModel, EmailStr, Field
from typing import Annotated, Literal, Optional, Union
from library_ledger.models.user import UserKind, MembershipType

class UserBase(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)

class MemberCreate(UserBase):
    kind: Literal["member"] = "member"
    membership_type: MembershipType = MembershipType.REGULAR

class LibrarianCreate(UserBase):
    kind: Literal["librarian"] = "librarian"
    employee_id: str = Field(..., min_length=1, max_length=50)

# Closed set of user variants, discriminated on ``kind``
UserCreate = Annotated[Union[MemberCreate, LibrarianCreate], Field(discriminator="kind")]

class UserResponse(BaseModel):
    user_id: str
    kind: UserKind
    name: str
    email: str
    phone: Optional[str] = None
    membership_type: Optional[MembershipType] = None
    employee_id: Optional[str] = None
    max_books_allowed: int
