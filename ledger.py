"""Ledger store: ownership-scoped CRUD over the transactions table.

Every statement filters on the caller's user id, so a transaction that
belongs to somebody else behaves exactly like one that does not exist.
"""
import logging

from sqlalchemy import delete, update
from sqlmodel import Session, select

from errors import NotFound
from models import Transaction
from schemas import TransactionIn
from utils import compute_summary, filter_transactions

logger = logging.getLogger(__name__)


class LedgerStore:
    def __init__(self, session: Session):
        self.session = session

    def list(
        self,
        user_id: str,
        query: str | None = None,
        tx_type: str | None = None,
        category: str | None = None,
    ) -> list[Transaction]:
        """Return the user's transactions, newest date first.

        Entries sharing a date come out most recently added first.
        """
        stmt = (
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(
                Transaction.date.desc(),
                Transaction.created_at.desc(),
                Transaction.id,
            )
        )
        rows = self.session.exec(stmt).all()
        return filter_transactions(rows, query=query, tx_type=tx_type, category=category)

    def create(self, user_id: str, payload: TransactionIn) -> Transaction:
        row = Transaction(user_id=user_id, **payload.model_dump())
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def update(self, user_id: str, transaction_id: str, payload: TransactionIn) -> None:
        """Replace every mutable field; raises NotFound if no owned row matches."""
        stmt = (
            update(Transaction)
            .where(Transaction.id == transaction_id, Transaction.user_id == user_id)
            .values(**payload.model_dump())
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            self.session.rollback()
            raise NotFound()
        self.session.commit()

    def delete(self, user_id: str, transaction_id: str) -> None:
        stmt = delete(Transaction).where(
            Transaction.id == transaction_id,
            Transaction.user_id == user_id,
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            self.session.rollback()
            raise NotFound()
        self.session.commit()

    def delete_all(self, user_id: str) -> int:
        """Clear the user's ledger. Succeeds even when it is already empty."""
        result = self.session.execute(
            delete(Transaction).where(Transaction.user_id == user_id)
        )
        self.session.commit()
        logger.info("Cleared %d transactions for user %s", result.rowcount, user_id)
        return result.rowcount

    def summary(self, user_id: str) -> dict[str, float]:
        rows = self.session.exec(
            select(Transaction).where(Transaction.user_id == user_id)
        ).all()
        return compute_summary(rows)
