import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from passlib.context import CryptContext
import jwt
from fastapi import Depends, Request
from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_SECRET, ALGORITHM
from app.errors import ForbiddenError, UnauthenticatedError
from models.models import SessionEntry

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes = ["pbkdf2_sha256"], deprecated = "auto")

SESSION_KEY = "authorization"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

def create_access_token(username: str, expires_delta: Optional[timedelta] = None) -> str:
    issued_at = _utcnow()
    expire = issued_at + (expires_delta or timedelta(minutes = ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": username, "iat": issued_at, "exp": expire}
    return jwt.encode(to_encode, JWT_SECRET, algorithm = ALGORITHM)

def decode_access_token(token: str) -> dict:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        ForbiddenError: "Token expired" once ``exp`` has passed, "Invalid token"
            for any other verification failure.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms = [ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ForbiddenError("Authentication failed. Please log in again.", error = "Token expired")
    except jwt.InvalidTokenError:
        raise ForbiddenError("Authentication failed. Please log in again.", error = "Invalid token")

    if not payload.get("sub"):
        raise ForbiddenError("Authentication failed. Please log in again.", error = "Invalid token")
    return payload

def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    return pwd_context.hash(password)

# -----------------------------------
# Session binding
# -----------------------------------
def start_session(request: Request, username: str) -> SessionEntry:
    """Mint a token for ``username`` and bind it to the client's session."""
    entry = SessionEntry(
        access_token = create_access_token(username),
        username = username,
        logged_in_at = _utcnow().isoformat()
    )
    request.session[SESSION_KEY] = entry.to_session()
    return entry

def get_session_entry(request: Request) -> Optional[SessionEntry]:
    data = request.session.get(SESSION_KEY)
    if not data:
        return None
    try:
        return SessionEntry.from_session(data)
    except (KeyError, TypeError):
        return None

# -----------------------------------
# Access gate
# -----------------------------------
def require_session_claims(request: Request) -> dict:
    """
    Gate for every route under ``/customer/auth``.

    A missing session entry is a 401; a session whose token no longer verifies
    is a 403. The session can outlive its token (24h cookie vs 1h token), so
    presence alone never authorizes anything.
    """
    entry = get_session_entry(request)
    if entry is None:
        logger.debug("Rejected %s %s: no active session", request.method, request.url.path)
        raise UnauthenticatedError("Authentication required. Please log in.")

    try:
        claims = decode_access_token(entry.access_token)
    except ForbiddenError as exc:
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.error)
        raise

    request.state.session_entry = entry
    return claims

def get_current_username(claims: dict = Depends(require_session_claims)) -> str:
    return claims["sub"]
