# onestop/schemas/library.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class CopyStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    ON_LOAN = "ON_LOAN"


class LoanStatus(str, Enum):
    ON_LOAN = "ON_LOAN"
    RETURNED = "RETURNED"


class BookCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64, examples=["Leadership"])
    icon: str = Field("Book", max_length=32, examples=["Compass"])
    color: str = Field("#f4c9a8", max_length=16, examples=["#f4c9a8"])


class BookCategoryRead(BookCategoryCreate):
    id: int

    class Config:
        from_attributes = True


class BookCreate(BaseModel):
    """
    Payload for adding a title to the library together with its copies.
    """

    category_id: int | None = Field(None, examples=[1])
    title: str = Field(..., min_length=1, examples=["Atomic Habits"])
    author: str = Field(..., min_length=1, examples=["James Clear"])
    cover_url: str | None = Field(None, description="Public URL of an already uploaded cover.")
    synopsis: str | None = None
    max_loan_days: int = Field(14, ge=1, le=365, description="Loan period applied at checkout.")
    total_copies: int = Field(
        1,
        ge=0,
        le=50,
        description="Physical copies to register; 0 lists the title without stock.",
    )


class BookCopyRead(BaseModel):
    id: int
    inventory_code: str
    status: CopyStatus

    class Config:
        from_attributes = True


class BookRead(BaseModel):
    """
    A title with its copies. `qr_payload` is the text encoded in the QR code
    stuck on the book; scanning it checks a copy out.
    """

    id: int
    category_id: int | None = None
    title: str
    author: str
    cover_url: str | None = None
    synopsis: str | None = None
    max_loan_days: int
    qr_payload: str = Field(..., examples=["book:1"])
    available_copies: int
    copies: list[BookCopyRead]


class BookCheckout(BaseModel):
    borrower_name: str = Field(..., min_length=1, examples=["Aisyah Rahman"])
    copy_id: int | None = Field(None, description="Specific copy; the first available one when omitted.")
    notes: str | None = None


class BookScan(BaseModel):
    qr_payload: str = Field(..., examples=["book:1"])
    borrower_name: str = Field(..., min_length=1, examples=["Aisyah Rahman"])
    copy_id: int | None = None


class BookLoanRead(BaseModel):
    id: int
    book_id: int
    copy_id: int
    borrower_name: str
    loan_status: LoanStatus
    loaned_at: datetime
    due_at: datetime
    returned_at: datetime | None = None
    notes: str | None = None

    class Config:
        from_attributes = True
