"""Pydantic schemas for API payloads and validation."""
from typing import Optional
from decimal import Decimal
import datetime as dt

from pydantic import field_validator, BaseModel, Field

from models import Category, TransactionType
from utils import normalize_iso_date

USERNAME_MAX_LEN = 150
TITLE_MAX_LEN = 100
NOTE_MAX_LEN = 500

# must match the transactions.amount column
AMOUNT_MAX_DIGITS = 14
AMOUNT_DECIMAL_PLACES = 2


class TitleNoteDateMixin:
    """Shared validators for title, note, and date normalization."""
    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("note", mode="before")
    @classmethod
    def strip_note(cls, v):
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v):
        return normalize_iso_date(v)


class TransactionIn(TitleNoteDateMixin, BaseModel):
    """Full field set for creating or replacing a transaction."""
    title: str = Field(min_length=1, max_length=TITLE_MAX_LEN)
    amount: Decimal = Field(
        ge=0,
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
    )
    type: TransactionType
    category: Category
    date: dt.date
    note: str = Field(default="", max_length=NOTE_MAX_LEN)

    class Config:
        use_enum_values = True


class TransactionRead(BaseModel):
    """Response model for a transaction. The owner id is never exposed."""
    id: str
    title: str
    amount: float
    type: str
    category: str
    date: dt.date
    note: str = ""

    class Config:
        from_attributes = True


class LedgerSummary(BaseModel):
    income: float
    expense: float
    balance: float


class Success(BaseModel):
    success: bool = True


# User & Auth schemas

class Credentials(BaseModel):
    """Payload for signup and login."""
    username: str = Field(min_length=1, max_length=USERNAME_MAX_LEN)
    password: str = Field(min_length=1)


class UserRead(BaseModel):
    """Response model for a user."""
    id: str
    username: str

    class Config:
        from_attributes = True


class UserEnvelope(BaseModel):
    user: UserRead


class TransactionFilter(BaseModel):
    """Optional list filters taken from the query string."""
    q: Optional[str] = None
    type: Optional[TransactionType] = None
    category: Optional[Category] = None

    class Config:
        use_enum_values = True
