import datetime as dt
import pytest
from pydantic import ValidationError
from schemas import Credentials, TransactionIn
from decimal import Decimal


def make(**overrides):
    data = {
        "title": "Taxi ride",
        "amount": Decimal("5"),
        "type": "expense",
        "category": "Travel",
        "date": "2025-01-01",
    }
    data.update(overrides)
    return TransactionIn(**data)


def test_transaction_in_trims_title_and_note():
    payload = make(title="  Taxi ride  ", note="  Airport  ")
    assert payload.title == "Taxi ride"
    assert payload.note == "Airport"


def test_transaction_in_note_defaults_to_empty():
    assert make().note == ""
    assert make(note=None).note == ""


def test_transaction_in_stores_enum_values_as_strings():
    payload = make(type="income", category="Salary")
    assert payload.type == "income"
    assert payload.category == "Salary"
    assert payload.model_dump()["type"] == "income"


def test_transaction_in_too_long_title_rejected():
    with pytest.raises(ValidationError):
        make(title="X" * 300)


def test_transaction_in_rejects_unknown_category():
    with pytest.raises(ValidationError):
        make(category="Groceries")


def test_transaction_in_rejects_negative_amount():
    with pytest.raises(ValidationError):
        make(amount=Decimal("-1"))


def test_transaction_in_parses_date_from_valid_string():
    obj = make(date="2025-01-15")

    assert isinstance(obj.date, dt.date)
    assert obj.date == dt.date(2025, 1, 15)


def test_transaction_in_keeps_date_instance():
    d = dt.date(2025, 2, 3)

    assert make(date=d).date == d


def test_transaction_in_rejects_invalid_date_format():
    with pytest.raises(ValidationError) as exc_info:
        make(date="03/02/2025")

    assert "Invalid date format. Expected YYYY-MM-DD." in str(exc_info.value)


def test_credentials_require_non_empty_values():
    with pytest.raises(ValidationError):
        Credentials(username="", password="pw")
    with pytest.raises(ValidationError):
        Credentials(username="alice", password="")
