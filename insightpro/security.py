"""
Password hashing and session-token primitives.

Hashing is delegated to pwdlib (Argon2, salted); tokens are HS256 JWTs
signed with PyJWT.  Nothing here touches the database or the request.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from pwdlib import PasswordHash

from insightpro.exceptions import Forbidden

logger = logging.getLogger(__name__)

_password_hash = PasswordHash.recommended()

BEARER_SCHEME = "bearer"


def hash_password(password: str) -> str:
    """Return a salted one-way hash of *password*."""
    return _password_hash.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Return whether *password* matches *password_hash*.

    A mismatch is ``False``; only a malformed or unrecognised hash raises
    (``pwdlib.exceptions.UnknownHashError``).
    """
    return _password_hash.verify(password, password_hash)


def issue_token(
    claims: dict[str, Any],
    secret: str,
    ttl: timedelta,
    algorithm: str = "HS256",
) -> str:
    """Sign *claims* plus ``iat``/``exp`` (now + *ttl*) into a JWT."""
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload.update({"iat": now, "exp": now + ttl})
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_token(token: str, secret: str, algorithm: str = "HS256") -> dict[str, Any]:
    """
    Decode *token* and return its claims.

    Raises ``Forbidden`` for an expired, malformed or wrongly signed token.
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise Forbidden("Token expired.")
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected invalid token: %s", exc)
        raise Forbidden("Invalid token.")


def extract_token(authorization: str | None) -> str | None:
    """
    Pull the token out of an ``Authorization`` header value.

    Accepts ``Bearer <token>`` (any case) as well as a bare token with no
    scheme.  Returns None when the header is absent or blank.
    """
    if not authorization:
        return None
    parts = authorization.strip().split(None, 1)
    if not parts:
        return None
    if len(parts) == 2 and parts[0].lower() == BEARER_SCHEME:
        return parts[1].strip() or None
    return parts[0]
