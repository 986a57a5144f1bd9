# checkout/data/unit_of_work.py
from typing import Callable

from sqlalchemy.orm import Session

from checkout.data.database import SessionLocal


class UnitOfWork:
    """
    Jedna sesja = jedna jednostka pracy.
    commit() to jawna granica trwałości zapisu; wyjście z błędem robi rollback,
    sesja jest zawsze zamykana.

        with UnitOfWork() as uow:
            ledger = OrderLedger(uow)
            ...
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory
        self.session: Session | None = None

    def __enter__(self) -> "UnitOfWork":
        self.session = self.session_factory()
        return self

    def __exit__(self, exc_type, exc, tb):
        try:
            if exc_type is not None:
                self.session.rollback()
        finally:
            self.session.close()

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
