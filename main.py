"""Main FastAPI application for the personal finance ledger."""
import datetime as dt
import logging

from fastapi import FastAPI, Depends, Response
from prometheus_fastapi_instrumentator import Instrumentator
from sqlmodel import Session

from auth import SessionIssuer
from config import Settings, get_settings
from credentials import CredentialStore
from db import engine, get_session, init_db
from errors import InvalidCredentials, register_error_handlers
from gate import Identity, authenticate, get_session_issuer
from ledger import LedgerStore
from models import User
from schemas import (
    Credentials,
    LedgerSummary,
    Success,
    TransactionFilter,
    TransactionIn,
    TransactionRead,
    UserEnvelope,
)

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Ledger", version=settings.version)
register_error_handlers(app)
Instrumentator().instrument(app).expose(app)


def get_credential_store(session: Session = Depends(get_session)) -> CredentialStore:
    return CredentialStore(session)


def get_ledger(session: Session = Depends(get_session)) -> LedgerStore:
    return LedgerStore(session)


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


def user_envelope(user: User | Identity) -> dict:
    user_id = user.user_id if isinstance(user, Identity) else user.id
    return {"user": {"id": user_id, "username": user.username}}


@app.on_event("startup")
def on_startup() -> None:
    """Wait for the database and make sure the tables exist."""
    init_db(
        engine,
        retries=settings.db_connect_retries,
        delay=settings.db_connect_delay,
    )


#API endpoint for quick health checks
@app.get("/health")
def health():
    return {
        "status": "ok",
        "timestamp": dt.datetime.utcnow().isoformat(),
        "app": settings.app_name,
        "version": settings.version,
    }


# AUTH ENDPOINTS
@app.post("/auth/signup", response_model=UserEnvelope)
def signup(
    payload: Credentials,
    response: Response,
    store: CredentialStore = Depends(get_credential_store),
    issuer: SessionIssuer = Depends(get_session_issuer),
    settings: Settings = Depends(get_settings),
):
    """Register a new user and start a session for them."""
    user = store.create_user(payload.username, payload.password)
    set_session_cookie(response, issuer.issue(user), settings)
    return user_envelope(user)


@app.post("/auth/login", response_model=UserEnvelope)
def login(
    payload: Credentials,
    response: Response,
    store: CredentialStore = Depends(get_credential_store),
    issuer: SessionIssuer = Depends(get_session_issuer),
    settings: Settings = Depends(get_settings),
):
    """Check credentials and set the session cookie."""
    user = store.verify_credentials(payload.username, payload.password)
    if user is None:
        logger.info("Failed login for username %r", payload.username)
        raise InvalidCredentials()

    set_session_cookie(response, issuer.issue(user), settings)
    return user_envelope(user)


@app.post("/auth/logout", response_model=Success)
def logout(response: Response, settings: Settings = Depends(get_settings)):
    """Clear the client's session cookie. The token itself stays valid until it expires."""
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return {"success": True}


@app.get("/auth/me", response_model=UserEnvelope)
def read_current_user(identity: Identity = Depends(authenticate)):
    """Return the user the session cookie belongs to."""
    return user_envelope(identity)


# TRANSACTION ENDPOINTS
# Every route below goes through the access gate first.
@app.get("/transactions", response_model=list[TransactionRead])
def list_transactions(
    filters: TransactionFilter = Depends(),
    identity: Identity = Depends(authenticate),
    ledger: LedgerStore = Depends(get_ledger),
):
    """List the caller's transactions ordered by date descending."""
    return ledger.list(
        identity.user_id,
        query=filters.q,
        tx_type=filters.type,
        category=filters.category,
    )


@app.get("/transactions/summary", response_model=LedgerSummary)
def transactions_summary(
    identity: Identity = Depends(authenticate),
    ledger: LedgerStore = Depends(get_ledger),
):
    """Income and expense totals and the balance for the caller's ledger."""
    return ledger.summary(identity.user_id)


@app.post("/transactions", response_model=TransactionRead)
def create_transaction(
    payload: TransactionIn,
    identity: Identity = Depends(authenticate),
    ledger: LedgerStore = Depends(get_ledger),
):
    return ledger.create(identity.user_id, payload)


@app.put("/transactions/{transaction_id}", response_model=Success)
def update_transaction(
    transaction_id: str,
    payload: TransactionIn,
    identity: Identity = Depends(authenticate),
    ledger: LedgerStore = Depends(get_ledger),
):
    """Replace all fields of one of the caller's transactions."""
    ledger.update(identity.user_id, transaction_id, payload)
    return {"success": True}


@app.delete("/transactions/{transaction_id}", response_model=Success)
def delete_transaction(
    transaction_id: str,
    identity: Identity = Depends(authenticate),
    ledger: LedgerStore = Depends(get_ledger),
):
    ledger.delete(identity.user_id, transaction_id)
    return {"success": True}


@app.delete("/transactions", response_model=Success)
def clear_transactions(
    identity: Identity = Depends(authenticate),
    ledger: LedgerStore = Depends(get_ledger),
):
    """Delete every transaction in the caller's ledger."""
    ledger.delete_all(identity.user_id)
    return {"success": True}
