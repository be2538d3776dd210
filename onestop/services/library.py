# onestop/services/library.py
from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from onestop.core.logging import get_logger
from onestop.models.library import Book, BookCategory, BookCopy, BookLoan
from onestop.schemas.library import BookCategoryCreate, BookCreate, CopyStatus, LoanStatus

logger = get_logger(__name__)

DEFAULT_MAX_LOAN_DAYS = 14
QR_PREFIX = "book:"


class CategoryNotFoundError(LookupError):
    """Raised when a book category id does not exist."""


class BookNotFoundError(LookupError):
    """Raised when a book id does not exist."""


class CopyNotFoundError(LookupError):
    """Raised when a copy id does not exist or belongs to another book."""


class LoanNotFoundError(LookupError):
    """Raised when a loan id does not exist."""


class CopyUnavailableError(Exception):
    """Base for checkouts that find no copy to lend."""


class AllCopiesOnLoanError(CopyUnavailableError):
    def __init__(self) -> None:
        super().__init__("All copies of this book are currently on loan. Please try another book.")


class NoAvailableCopyError(CopyUnavailableError):
    def __init__(self) -> None:
        super().__init__("No available copy found for this book. Please contact admin.")


class CopyOnLoanError(CopyUnavailableError):
    def __init__(self, copy_id: int) -> None:
        self.copy_id = copy_id
        super().__init__(f"Copy id={copy_id} is already on loan.")


class LoanAlreadyReturnedError(ValueError):
    """Raised when checking in a loan that was already returned."""


class InvalidQrPayloadError(ValueError):
    """Raised when a scanned QR code is not a library book code."""


class DuplicateCategoryError(ValueError):
    """Raised when a category name is already taken."""


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def compute_due_at(loaned_at: datetime, max_loan_days: Optional[int]) -> datetime:
    """
    Due date of a loan: `loaned_at` plus the book's loan period, or
    DEFAULT_MAX_LOAN_DAYS when the book has none.
    """
    days = max_loan_days or DEFAULT_MAX_LOAN_DAYS
    return loaned_at + timedelta(days=days)


def qr_payload_for(book_id: int) -> str:
    return f"{QR_PREFIX}{book_id}"


def parse_qr_payload(payload: str) -> int:
    """
    Return the book id encoded in a scanned code such as "book:12".
    """
    text = (payload or "").strip()
    if not text.startswith(QR_PREFIX):
        raise InvalidQrPayloadError(f"QR code {payload!r} is not a library book code")

    raw_id = text[len(QR_PREFIX):]
    if not raw_id.isdigit() or int(raw_id) < 1:
        raise InvalidQrPayloadError(f"QR code {payload!r} does not carry a book id")
    return int(raw_id)


def available_copy_count(book: Book) -> int:
    return sum(1 for copy in book.copies if copy.status == CopyStatus.AVAILABLE.value)


def new_inventory_code() -> str:
    return f"INV-{secrets.token_hex(3).upper()}"


async def create_category(db: AsyncSession, payload: BookCategoryCreate) -> BookCategory:
    result = await db.execute(select(BookCategory).where(BookCategory.name == payload.name))
    if result.scalar_one_or_none() is not None:
        raise DuplicateCategoryError(f"Category {payload.name!r} already exists")

    category = BookCategory(**payload.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)

    logger.info("Created book category id=%s name=%r", category.id, category.name)
    return category


async def list_categories(db: AsyncSession) -> list[BookCategory]:
    result = await db.execute(select(BookCategory).order_by(BookCategory.name))
    return list(result.scalars().all())


async def create_book(db: AsyncSession, payload: BookCreate) -> Book:
    """
    Add a title and register `total_copies` AVAILABLE copies for it.

    Raises
    ------
    CategoryNotFoundError
        `category_id` is given but unknown.
    """
    if payload.category_id is not None:
        category = await db.get(BookCategory, payload.category_id)
        if category is None:
            raise CategoryNotFoundError(f"Book category with id={payload.category_id} not found")

    book = Book(**payload.model_dump(exclude={"total_copies"}))
    book.copies = [
        BookCopy(inventory_code=new_inventory_code(), status=CopyStatus.AVAILABLE.value)
        for _ in range(payload.total_copies)
    ]
    db.add(book)
    await db.commit()

    logger.info(
        "Created book id=%s title=%r copies=%d",
        book.id,
        book.title,
        payload.total_copies,
    )
    return await get_book(db, book.id)


async def list_books(db: AsyncSession, category_id: Optional[int] = None) -> list[Book]:
    stmt = select(Book).order_by(Book.title, Book.id)
    if category_id is not None:
        stmt = stmt.where(Book.category_id == category_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_book(db: AsyncSession, book_id: int) -> Book:
    stmt = (
        select(Book)
        .where(Book.id == book_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    book = result.scalar_one_or_none()
    if book is None:
        raise BookNotFoundError(f"Book with id={book_id} not found")
    return book


def _pick_copy(book: Book, copy_id: Optional[int]) -> BookCopy:
    if copy_id is not None:
        for copy in book.copies:
            if copy.id == copy_id:
                if copy.status != CopyStatus.AVAILABLE.value:
                    raise CopyOnLoanError(copy_id)
                return copy
        raise CopyNotFoundError(f"Copy with id={copy_id} not found for book id={book.id}")

    for copy in book.copies:
        if copy.status == CopyStatus.AVAILABLE.value:
            return copy

    if book.copies:
        raise AllCopiesOnLoanError()
    raise NoAvailableCopyError()


async def checkout_book(
    db: AsyncSession,
    book_id: int,
    borrower_name: str,
    copy_id: Optional[int] = None,
    notes: Optional[str] = None,
    loaned_at: Optional[datetime] = None,
) -> BookLoan:
    """
    Lend a copy of `book_id` to `borrower_name`.

    Uses `copy_id` when given, otherwise the lowest-id AVAILABLE copy. The
    copy moves to ON_LOAN and the loan is due `max_loan_days` after
    `loaned_at` (now by default).

    Raises
    ------
    BookNotFoundError, CopyNotFoundError
        Unknown book, or a copy id that is not one of its copies.
    CopyUnavailableError
        The chosen copy is on loan, every copy is on loan, or the book has
        no copies.
    """
    book = await get_book(db, book_id)
    copy = _pick_copy(book, copy_id)

    # Claim the copy only if it is still AVAILABLE in the database
    claimed = await db.execute(
        update(BookCopy)
        .where(BookCopy.id == copy.id, BookCopy.status == CopyStatus.AVAILABLE.value)
        .values(status=CopyStatus.ON_LOAN.value)
    )
    if claimed.rowcount != 1:
        await db.rollback()
        raise CopyOnLoanError(copy.id)

    loaned_at = loaned_at or _utcnow()
    loan = BookLoan(
        book_id=book.id,
        copy_id=copy.id,
        borrower_name=borrower_name,
        loan_status=LoanStatus.ON_LOAN.value,
        loaned_at=loaned_at,
        due_at=compute_due_at(loaned_at, book.max_loan_days),
        notes=notes,
    )
    db.add(loan)
    await db.commit()
    await db.refresh(loan)

    logger.info(
        "Loan id=%s: copy %s of book id=%s to %r, due %s",
        loan.id,
        copy.inventory_code,
        book.id,
        borrower_name,
        loan.due_at,
    )
    return loan


async def scan_book_qr(
    db: AsyncSession,
    payload: str,
    borrower_name: str,
    copy_id: Optional[int] = None,
) -> BookLoan:
    """Check out the book whose QR code was scanned."""
    book_id = parse_qr_payload(payload)
    return await checkout_book(db, book_id, borrower_name, copy_id=copy_id)


async def return_loan(
    db: AsyncSession,
    loan_id: int,
    returned_at: Optional[datetime] = None,
) -> BookLoan:
    result = await db.execute(select(BookLoan).where(BookLoan.id == loan_id))
    loan = result.scalar_one_or_none()
    if loan is None:
        raise LoanNotFoundError(f"Loan with id={loan_id} not found")
    if loan.loan_status == LoanStatus.RETURNED.value:
        raise LoanAlreadyReturnedError(f"Loan id={loan_id} was already returned")

    loan.loan_status = LoanStatus.RETURNED.value
    loan.returned_at = returned_at or _utcnow()

    copy = await db.get(BookCopy, loan.copy_id)
    if copy is not None:
        copy.status = CopyStatus.AVAILABLE.value

    await db.commit()
    await db.refresh(loan)

    logger.info("Loan id=%s returned by %r", loan.id, loan.borrower_name)
    return loan


async def list_loans(
    db: AsyncSession,
    borrower_name: Optional[str] = None,
    active_only: bool = False,
) -> list[BookLoan]:
    stmt = select(BookLoan).order_by(BookLoan.loaned_at.desc(), BookLoan.id.desc())
    if borrower_name:
        stmt = stmt.where(BookLoan.borrower_name == borrower_name)
    if active_only:
        stmt = stmt.where(BookLoan.loan_status == LoanStatus.ON_LOAN.value)
    result = await db.execute(stmt)
    return list(result.scalars().all())
