# onestop/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models of the portal.

    Models register themselves on import; `onestop.models` imports every
    model module so `Base.metadata` is complete before `create_all`.
    """
    pass
