from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from config import Settings

#  Use Argon2id (modern, memory-hard)
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    # Argon2id settings
    argon2__type="ID",
    argon2__memory_cost=65536,  # 64 MB
    argon2__time_cost=3,
    argon2__parallelism=1,
)

PASSWORD_MAX_LEN = 256


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify_password() -> None:
    """Spend the same time as a real verification, for unknown usernames."""
    pwd_context.dummy_verify()


def get_password_hash(password: str) -> str:
    # enforce a max length to avoid pathological huge input
    if len(password) > PASSWORD_MAX_LEN:
        raise ValueError("Password too long")
    return pwd_context.hash(password)


class SessionClaims(BaseModel):
    """What a verified session token asserts about its bearer."""
    user_id: str
    username: str
    issued_at: datetime
    expires_at: datetime


class SessionIssuer:
    """Issues and verifies signed, time-limited session tokens (HS256 JWTs).

    Nothing is stored server-side: a token stays valid until its ``exp``
    claim passes or the secret changes.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=7)):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionIssuer":
        return cls(
            secret=settings.session_secret,
            algorithm=settings.session_algorithm,
            ttl=timedelta(days=settings.session_ttl_days),
        )

    def encode(self, data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        to_encode = data.copy()
        if expires_delta is None:
            expires_delta = self.ttl

        issued_at = datetime.now(timezone.utc)
        to_encode["iat"] = issued_at
        to_encode["exp"] = issued_at + expires_delta
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def issue(self, user, expires_delta: Optional[timedelta] = None) -> str:
        """Return a signed token for ``user`` (anything with ``id``/``username``)."""
        return self.encode({"sub": user.id, "username": user.username}, expires_delta)

    def verify(self, token: str) -> Optional[SessionClaims]:
        """Return the token's claims, or None if it is tampered, malformed or expired."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            return None

        user_id = payload.get("sub")
        username = payload.get("username")
        if not user_id or not username or "exp" not in payload:
            return None

        return SessionClaims(
            user_id=user_id,
            username=username,
            issued_at=datetime.fromtimestamp(payload.get("iat", payload["exp"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
