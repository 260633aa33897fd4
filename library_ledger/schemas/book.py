from pydantic import BaseModel, Field, field_validator

class BookBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    category: str = Field("", max_length=100)
    total_copies: int = Field(..., ge=0)
    price: float = Field(0.0, ge=0)

class BookCreate(BookBase):
    isbn: str = Field(..., max_length=32)

    @field_validator("isbn")
    @classmethod
    def isbn_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("ISBN cannot be empty")
        return value

class BookUpdate(BookBase):
    """Replacement record for an existing ISBN; available copies are reconciled, not taken from here."""
    pass

class BookResponse(BookCreate):
    available_copies: int

    class Config:
        from_attributes = True
