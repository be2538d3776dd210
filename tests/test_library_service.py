# tests/test_library_service.py
from datetime import datetime, timezone

import pytest

from onestop.db.session import AsyncSessionLocal, init_db_for_startup
from onestop.schemas.library import BookCreate
from onestop.services.library import (
    DEFAULT_MAX_LOAN_DAYS,
    AllCopiesOnLoanError,
    CopyNotFoundError,
    CopyOnLoanError,
    InvalidQrPayloadError,
    LoanAlreadyReturnedError,
    NoAvailableCopyError,
    checkout_book,
    compute_due_at,
    create_book,
    get_book,
    list_loans,
    parse_qr_payload,
    qr_payload_for,
    return_loan,
    scan_book_qr,
)


def test_due_date_uses_book_loan_period():
    loaned = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

    assert compute_due_at(loaned, 7) == datetime(2026, 3, 8, 9, 0, tzinfo=timezone.utc)


def test_due_date_falls_back_to_default_period():
    loaned = datetime(2026, 3, 1, 9, 0)

    assert DEFAULT_MAX_LOAN_DAYS == 14
    assert compute_due_at(loaned, None) == datetime(2026, 3, 15, 9, 0)
    assert compute_due_at(loaned, 0) == datetime(2026, 3, 15, 9, 0)


def test_qr_payload_names_the_book():
    assert qr_payload_for(42) == "book:42"
    assert parse_qr_payload("book:42") == 42
    assert parse_qr_payload("  book:7\n") == 7


@pytest.mark.parametrize("payload", ["", "42", "book:", "book:abc", "book:0", "room:1", "book:-3"])
def test_parse_qr_payload_rejects_foreign_codes(payload):
    with pytest.raises(InvalidQrPayloadError):
        parse_qr_payload(payload)


@pytest.mark.asyncio
async def test_checkout_takes_lowest_available_copy_and_sets_due_date():
    await init_db_for_startup()
    loaned = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

    async with AsyncSessionLocal() as session:
        book = await create_book(
            session,
            BookCreate(title="Deep Work", author="Cal Newport", max_loan_days=10, total_copies=2),
        )
        first, second = book.copies

        loan = await checkout_book(session, book.id, "Farid", loaned_at=loaned)
        assert loan.copy_id == first.id
        assert loan.loan_status == "ON_LOAN"
        assert loan.due_at.replace(tzinfo=None) == datetime(2026, 3, 11, 9, 0)

        again = await checkout_book(session, book.id, "Mei Ling", loaned_at=loaned)
        assert again.copy_id == second.id

        with pytest.raises(AllCopiesOnLoanError):
            await checkout_book(session, book.id, "Ravi")


@pytest.mark.asyncio
async def test_checkout_of_specific_copy():
    await init_db_for_startup()

    async with AsyncSessionLocal() as session:
        book = await create_book(session, BookCreate(title="Range", author="David Epstein", total_copies=2))
        other = await create_book(session, BookCreate(title="Drive", author="Daniel Pink", total_copies=1))
        wanted = book.copies[1]

        loan = await checkout_book(session, book.id, "Farid", copy_id=wanted.id)
        assert loan.copy_id == wanted.id

        with pytest.raises(CopyOnLoanError):
            await checkout_book(session, book.id, "Mei Ling", copy_id=wanted.id)

        # a copy of another title is not found under this book
        with pytest.raises(CopyNotFoundError):
            await checkout_book(session, book.id, "Mei Ling", copy_id=other.copies[0].id)


@pytest.mark.asyncio
async def test_book_without_copies_cannot_be_lent():
    await init_db_for_startup()

    async with AsyncSessionLocal() as session:
        book = await create_book(session, BookCreate(title="Shape Up", author="Ryan Singer", total_copies=0))

        with pytest.raises(NoAvailableCopyError):
            await scan_book_qr(session, qr_payload_for(book.id), "Farid")


@pytest.mark.asyncio
async def test_return_puts_copy_back_on_shelf():
    await init_db_for_startup()

    async with AsyncSessionLocal() as session:
        book = await create_book(session, BookCreate(title="Quiet", author="Susan Cain", total_copies=1))
        loan = await checkout_book(session, book.id, "Nurul Svc")

        returned = await return_loan(session, loan.id)
        assert returned.loan_status == "RETURNED"
        assert returned.returned_at is not None

        refreshed = await get_book(session, book.id)
        assert refreshed.copies[0].status == "AVAILABLE"

        with pytest.raises(LoanAlreadyReturnedError):
            await return_loan(session, loan.id)

        active = await list_loans(session, borrower_name="Nurul Svc", active_only=True)
        assert active == []
