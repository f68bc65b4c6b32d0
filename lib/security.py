# =============================================================================
# lib/security.py - Credentials and Tokens
# =============================================================================
# Password hashing (bcrypt) and JWT issuance/verification (python-jose).
#
# Access tokens carry (sub, email, role). A role change therefore only takes
# effect once a new token is issued; already-issued tokens are not revoked.
#
# Usage:
#   issuer = TokenIssuer(settings)
#   pair = issuer.issue(user.id, user.email, user.role)
#   claims = issuer.decode_access(pair.access_token)
# =============================================================================

import logging
from datetime import timedelta
from typing import Any
from uuid import UUID

import bcrypt
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import BaseModel

from app.config import Settings
from lib.utils import ApplicationError, utc_now

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
TOKEN_ISSUER = "modelhub"
ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    ).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        logger.warning("Stored password hash could not be parsed")
        return False


# =============================================================================
# Tokens
# =============================================================================

class TokenError(ApplicationError):
    """Raised when a token cannot be decoded or has the wrong type."""

    def __init__(self, message: str, code: str = "TOKEN_INVALID"):
        super().__init__(message, code=code)


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenClaims(BaseModel):
    """Identity carried by an access token."""
    sub: UUID
    email: str
    role: str


class TokenIssuer:
    """
    Issues and verifies HS256 access/refresh token pairs.

    Built from the immutable Settings; holds no other state.
    """

    def __init__(self, settings: Settings):
        self._secret = settings.JWT_SECRET
        self._algorithm = settings.JWT_ALGORITHM
        self._access_ttl = timedelta(hours=settings.JWT_EXPIRE_HOURS)
        self._refresh_ttl = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)

    def issue(self, user_id: UUID | str, email: str, role: str) -> TokenPair:
        now = utc_now()
        access_claims = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "typ": ACCESS_TOKEN,
            "iss": TOKEN_ISSUER,
            "iat": now,
            "nbf": now,
            "exp": now + self._access_ttl,
        }
        refresh_claims = {
            "sub": str(user_id),
            "typ": REFRESH_TOKEN,
            "iss": TOKEN_ISSUER,
            "iat": now,
            "exp": now + self._refresh_ttl,
        }
        return TokenPair(
            access_token=jwt.encode(access_claims, self._secret, algorithm=self._algorithm),
            refresh_token=jwt.encode(refresh_claims, self._secret, algorithm=self._algorithm),
            expires_in=int(self._access_ttl.total_seconds()),
        )

    def _decode(self, token: str, expected_type: str) -> dict[str, Any]:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=TOKEN_ISSUER,
            )
        except ExpiredSignatureError:
            raise TokenError("Token has expired", code="TOKEN_EXPIRED")
        except JWTError as e:
            raise TokenError(f"Invalid token: {e}")

        if payload.get("typ") != expected_type:
            raise TokenError(f"Expected a {expected_type} token")
        return payload

    def decode_access(self, token: str) -> TokenClaims:
        payload = self._decode(token, ACCESS_TOKEN)
        try:
            return TokenClaims(
                sub=payload.get("sub"),
                email=payload.get("email"),
                role=payload.get("role"),
            )
        except ValueError as e:
            raise TokenError(f"Invalid token claims: {e}")

    def decode_refresh(self, token: str) -> UUID:
        payload = self._decode(token, REFRESH_TOKEN)
        try:
            return UUID(payload.get("sub"))
        except (TypeError, ValueError):
            raise TokenError("Invalid token: malformed user ID")
