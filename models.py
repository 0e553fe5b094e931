import uuid
import datetime as dt
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from sqlmodel import SQLModel, Field


class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class Category(str, Enum):
    """The fixed set of transaction categories."""
    food = "Food"
    travel = "Travel"
    bills = "Bills"
    shopping = "Shopping"
    salary = "Salary"
    investment = "Investment"
    entertainment = "Entertainment"
    health = "Health"
    others = "Others"


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# These classes describe what data will be stored in the database.
# Each class = one table.
class User(SQLModel, table=True):
    """Account table. Usernames are unique and compared case-sensitively."""
    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True)
    username: str = Field(index=True, unique=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=utc_now)


class Transaction(SQLModel, table=True):
    """One income or expense entry in a user's ledger.

    - 'user_id' is set on insert and never changed afterwards.
    - 'created_at' only exists to order entries that share the same date.
    """
    __tablename__ = "transactions"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True, nullable=False)
    title: str
    amount: Decimal = Field(ge=0, max_digits=14, decimal_places=2)  # see schemas.AMOUNT_*
    type: str  # 'income' or 'expense'
    category: str
    date: dt.date
    note: str = ""
    created_at: datetime = Field(default_factory=utc_now)
