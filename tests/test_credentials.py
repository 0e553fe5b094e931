import pytest
from sqlmodel import select

import auth
from credentials import CredentialStore
from errors import DuplicateUsername, ValidationError
from models import User


def test_create_user_stores_hash_not_password(db_session):
    store = CredentialStore(db_session)

    user = store.create_user("alice", "pw1")

    assert user.id
    assert user.username == "alice"
    assert user.hashed_password != "pw1"


def test_create_user_duplicate_raises(db_session):
    store = CredentialStore(db_session)
    store.create_user("bob", "pw")

    with pytest.raises(DuplicateUsername):
        store.create_user("bob", "other")

    rows = db_session.exec(select(User).where(User.username == "bob")).all()
    assert len(rows) == 1


def test_create_user_rejects_huge_password(db_session):
    with pytest.raises(ValidationError):
        CredentialStore(db_session).create_user("carol", "p" * 1000)


def test_verify_credentials(db_session):
    store = CredentialStore(db_session)
    created = store.create_user("dave", "s3cret")

    assert store.verify_credentials("dave", "s3cret").id == created.id
    assert store.verify_credentials("dave", "wrong") is None
    assert store.verify_credentials("nobody", "s3cret") is None
    assert store.verify_credentials("DAVE", "s3cret") is None


def test_unknown_username_still_runs_a_hash_check(db_session, monkeypatch):
    calls = []
    monkeypatch.setattr(auth.pwd_context, "dummy_verify", lambda *a, **kw: calls.append(1))
    store = CredentialStore(db_session)
    store.create_user("erin", "pw")

    assert store.verify_credentials("nobody", "pw") is None
    assert calls == [1]

    # a known user goes through the real verification instead
    assert store.verify_credentials("erin", "wrong") is None
    assert calls == [1]
