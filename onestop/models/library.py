# onestop/models/library.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from onestop.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class BookCategory(Base):
    __tablename__ = "book_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(64), nullable=False, unique=True)
    icon = Column(String(32), nullable=False, default="Book")
    color = Column(String(16), nullable=False, default="#f4c9a8")

    def __repr__(self) -> str:
        return f"<BookCategory id={self.id} name={self.name!r}>"


class Book(Base):
    """
    A title in the staff library. Physical copies are tracked separately so
    a title can be lent to several people at once.
    """

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(
        Integer,
        ForeignKey("book_categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    cover_url = Column(String(512), nullable=True)
    synopsis = Column(Text, nullable=True)
    max_loan_days = Column(Integer, nullable=False, default=14)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    copies = relationship(
        "BookCopy",
        back_populates="book",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="BookCopy.id",
    )

    def __repr__(self) -> str:
        return f"<Book id={self.id} title={self.title!r}>"


class BookCopy(Base):
    """
    One physical copy of a book; `status` is AVAILABLE or ON_LOAN.
    """

    __tablename__ = "book_copies"

    id = Column(Integer, primary_key=True, index=True)
    book_id = Column(
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    inventory_code = Column(String(32), nullable=False, unique=True)
    status = Column(String(16), nullable=False, default="AVAILABLE", index=True)

    book = relationship("Book", back_populates="copies")

    def __repr__(self) -> str:
        return f"<BookCopy id={self.id} book_id={self.book_id} status={self.status}>"


class BookLoan(Base):
    __tablename__ = "book_loans"

    id = Column(Integer, primary_key=True, index=True)
    book_id = Column(
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    copy_id = Column(
        Integer,
        ForeignKey("book_copies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    borrower_name = Column(String(128), nullable=False, index=True)
    loan_status = Column(String(16), nullable=False, default="ON_LOAN", index=True)
    loaned_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    due_at = Column(DateTime(timezone=True), nullable=False)
    returned_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<BookLoan id={self.id} copy_id={self.copy_id} "
            f"borrower={self.borrower_name!r} status={self.loan_status}>"
        )
