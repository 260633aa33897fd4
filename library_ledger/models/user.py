import enum
from sqlalchemy import Column, String, CheckConstraint
from library_ledger.database import Base

class UserKind(str, enum.Enum):
    MEMBER = "member"
    LIBRARIAN = "librarian"

class MembershipType(str, enum.Enum):
    REGULAR = "REGULAR"
    PREMIUM = "PREMIUM"

class User(Base):
    __tablename__ = "user"

    user_id = Column(String(50), primary_key=True)
    kind = Column(String(20), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    membership_type = Column(String(20), nullable=True)  # members only
    employee_id = Column(String(50), nullable=True)  # librarians only

    __table_args__ = (
        CheckConstraint("kind IN ('member', 'librarian')", name="chk_user_kind"),
        CheckConstraint(
            "(kind = 'member' AND membership_type IN ('REGULAR', 'PREMIUM')) OR "
            "(kind = 'librarian' AND employee_id IS NOT NULL)",
            name="chk_user_variant",
        ),
    )
