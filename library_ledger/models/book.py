from sqlalchemy import Column, String, Integer, Numeric, CheckConstraint
from library_ledger.database import Base

class Book(Base):
    __tablename__ = "book"

    isbn = Column(String(32), primary_key=True)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, default="", index=True)
    total_copies = Column(Integer, nullable=False, default=0)
    available_copies = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0.00)

    __table_args__ = (
        CheckConstraint("total_copies >= 0", name="chk_book_total_copies"),
        CheckConstraint("available_copies >= 0 AND available_copies <= total_copies", name="chk_book_available_copies"),
        CheckConstraint("price >= 0", name="chk_book_price"),
    )

    @property
    def copies_on_loan(self) -> int:
        return self.total_copies - self.available_copies

    def borrow_copy(self) -> bool:
        if self.available_copies > 0:
            self.available_copies -= 1
            return True
        return False

    def return_copy(self) -> None:
        if self.available_copies < self.total_copies:
            self.available_copies += 1

