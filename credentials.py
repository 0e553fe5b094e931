"""Credential store: account creation and password checks."""
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from auth import dummy_verify_password, get_password_hash, verify_password
from errors import DuplicateUsername, ValidationError
from models import User

logger = logging.getLogger(__name__)


class CredentialStore:
    """Persists usernames and salted password hashes."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by exact (case-sensitive) username or return None."""
        stmt = select(User).where(User.username == username)
        return self.session.exec(stmt).first()

    def create_user(self, username: str, password: str) -> User:
        """Create an account, raising DuplicateUsername if the name is taken."""
        if self.get_by_username(username) is not None:
            raise DuplicateUsername()

        try:
            hashed = get_password_hash(password)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        user = User(username=username, hashed_password=hashed)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            # lost a race with a concurrent signup for the same name
            self.session.rollback()
            raise DuplicateUsername() from exc
        self.session.refresh(user)

        logger.info("Created user %s", user.id)
        return user

    def verify_credentials(self, username: str, password: str) -> User | None:
        """Return the user if the password matches, otherwise None."""
        user = self.get_by_username(username)
        if user is None:
            dummy_verify_password()
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user
