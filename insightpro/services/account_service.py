"""
Account service: registration and login for the Account aggregate.

Accounts are write-once: registration creates them, login only reads them.
E-mail addresses are trimmed and lower-cased before every lookup and insert
so that ``Alice@Example.com`` and ``alice@example.com`` are one account.
"""
import logging
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from insightpro.config import settings
from insightpro.exceptions import AccountNotFound, Conflict, Unauthorized, ValidationError
from insightpro.models import Account
from insightpro.security import hash_password, issue_token, verify_password

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _require(*values: str | None) -> None:
    if any(value is None or not value.strip() for value in values):
        raise ValidationError("Please fill in all fields.")


async def _find_by_email(db: AsyncSession, email: str) -> Account | None:
    result = await db.execute(select(Account).where(Account.email == email))
    return result.scalar_one_or_none()


async def register(
    db: AsyncSession,
    email: str | None,
    password: str | None,
    company: str | None,
) -> dict:
    """
    Create a new account and return a confirmation message.

    The pre-check gives the usual "already registered" answer; two
    concurrent registrations can both pass it, in which case the unique
    index on ``accounts.email`` rejects the second insert and that is
    reported as the same ``Conflict``.
    """
    _require(email, password, company)
    email = _normalize_email(email)

    if await _find_by_email(db, email) is not None:
        raise Conflict("E-mail already registered.")

    account = Account(
        email=email,
        password_hash=hash_password(password),
        company=company.strip(),
    )
    db.add(account)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise Conflict("E-mail already registered.")

    logger.info("Registered account id=%s company=%r", account.id, account.company)
    return {"message": "User registered successfully!"}


async def login(
    db: AsyncSession,
    email: str | None,
    password: str | None,
    secret: str | None = None,
    ttl: timedelta | None = None,
) -> dict:
    """
    Check *email*/*password* and return ``{"token", "company"}``.

    The token carries the account's id, e-mail and company and expires after
    *ttl* (``ACCESS_TOKEN_TTL_MINUTES`` by default).
    """
    _require(email, password)
    email = _normalize_email(email)

    account = await _find_by_email(db, email)
    if account is None:
        logger.warning("Login for unknown e-mail")
        raise AccountNotFound("User not found.")

    if not verify_password(password, account.password_hash):
        logger.warning("Login with wrong password for account id=%s", account.id)
        raise Unauthorized("Invalid credentials.")

    if ttl is None:
        ttl = timedelta(minutes=settings.ACCESS_TOKEN_TTL_MINUTES)
    token = issue_token(
        {"id": account.id, "email": account.email, "company": account.company},
        secret or settings.SECRET_KEY,
        ttl,
        algorithm=settings.JWT_ALGORITHM,
    )
    return {"token": token, "company": account.company}
