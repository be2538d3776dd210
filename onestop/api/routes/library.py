# onestop/api/routes/library.py
from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from onestop.db.session import get_db
from onestop.models.library import Book
from onestop.schemas.library import (
    BookCategoryRead,
    BookCheckout,
    BookCopyRead,
    BookLoanRead,
    BookRead,
    BookScan,
)
from onestop.services.library import (
    CopyUnavailableError,
    available_copy_count,
    checkout_book,
    get_book,
    list_books,
    list_categories,
    list_loans,
    qr_payload_for,
    return_loan,
    scan_book_qr,
)

router = APIRouter(prefix="/library", tags=["Library"])


def book_read(book: Book) -> BookRead:
    return BookRead(
        id=book.id,
        category_id=book.category_id,
        title=book.title,
        author=book.author,
        cover_url=book.cover_url,
        synopsis=book.synopsis,
        max_loan_days=book.max_loan_days,
        qr_payload=qr_payload_for(book.id),
        available_copies=available_copy_count(book),
        copies=[BookCopyRead.model_validate(c) for c in book.copies],
    )


def checkout_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, LookupError):
        return HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    if isinstance(exc, CopyUnavailableError):
        return HTTPException(status_code=HTTPStatus.CONFLICT, detail=str(exc))
    return HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))


@router.get(
    "/categories",
    response_model=list[BookCategoryRead],
    summary="List book categories",
)
async def get_categories(db: AsyncSession = Depends(get_db)) -> list[BookCategoryRead]:
    categories = await list_categories(db)
    return [BookCategoryRead.model_validate(c) for c in categories]


@router.get(
    "/books",
    response_model=list[BookRead],
    summary="List books with their copies",
)
async def get_books(
    category_id: Optional[int] = Query(None, ge=1),
    db: AsyncSession = Depends(get_db),
) -> list[BookRead]:
    books = await list_books(db, category_id=category_id)
    return [book_read(b) for b in books]


@router.get(
    "/books/{book_id}",
    response_model=BookRead,
    summary="Get a book",
    responses={404: {"description": "Book not found."}},
)
async def get_book_by_id(
    book_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_db),
) -> BookRead:
    try:
        book = await get_book(db, book_id)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    return book_read(book)


@router.post(
    "/books/{book_id}/checkout",
    response_model=BookLoanRead,
    status_code=HTTPStatus.CREATED,
    summary="Borrow a book",
    description=(
        "Lends the given copy, or the first available copy when `copy_id` is "
        "omitted. The loan is due after the book's loan period (14 days unless "
        "the book sets its own)."
    ),
    responses={
        404: {"description": "Book or copy not found."},
        409: {"description": "No copy of the book can be lent right now."},
    },
)
async def post_checkout(
    payload: BookCheckout,
    book_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_db),
) -> BookLoanRead:
    try:
        loan = await checkout_book(
            db,
            book_id,
            payload.borrower_name,
            copy_id=payload.copy_id,
            notes=payload.notes,
        )
    except (LookupError, CopyUnavailableError) as exc:
        raise checkout_http_exception(exc)
    return BookLoanRead.model_validate(loan)


@router.post(
    "/scan",
    response_model=BookLoanRead,
    status_code=HTTPStatus.CREATED,
    summary="Borrow a book by scanning its QR code",
    responses={
        400: {"description": "The scanned code is not a library book code."},
        404: {"description": "Book or copy not found."},
        409: {"description": "No copy of the book can be lent right now."},
    },
)
async def post_scan(
    payload: BookScan,
    db: AsyncSession = Depends(get_db),
) -> BookLoanRead:
    try:
        loan = await scan_book_qr(
            db,
            payload.qr_payload,
            payload.borrower_name,
            copy_id=payload.copy_id,
        )
    except (LookupError, CopyUnavailableError, ValueError) as exc:
        raise checkout_http_exception(exc)
    return BookLoanRead.model_validate(loan)


@router.get(
    "/loans",
    response_model=list[BookLoanRead],
    summary="List loans",
    description="Newest first. `active_only` keeps loans that are still ON_LOAN.",
)
async def get_loans(
    borrower_name: Optional[str] = Query(None),
    active_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
) -> list[BookLoanRead]:
    loans = await list_loans(db, borrower_name=borrower_name, active_only=active_only)
    return [BookLoanRead.model_validate(loan) for loan in loans]


@router.post(
    "/loans/{loan_id}/return",
    response_model=BookLoanRead,
    summary="Return a borrowed book",
    description="Marks the loan RETURNED and puts the copy back on the shelf.",
    responses={
        400: {"description": "Loan was already returned."},
        404: {"description": "Loan not found."},
    },
)
async def post_return(
    loan_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_db),
) -> BookLoanRead:
    try:
        loan = await return_loan(db, loan_id)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))
    return BookLoanRead.model_validate(loan)
