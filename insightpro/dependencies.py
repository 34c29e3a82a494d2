from fastapi import Header, Request

from insightpro.config import settings
from insightpro.exceptions import Unauthenticated
from insightpro.security import extract_token, verify_token


async def require_token(
    request: Request,
    authorization: str | None = Header(None),
) -> dict:
    """
    Reusable FastAPI dependency that gates a route behind a session token.

    Usage in a router::

        @router.get("/me")
        async def me(claims: dict = Depends(require_token)):
            ...

    The ``Authorization`` header may carry ``Bearer <token>`` or the bare
    token.  A missing header raises ``Unauthenticated`` (401); an invalid or
    expired token raises ``Forbidden`` (403).  On success the decoded claims
    are stored on ``request.state.claims`` and returned.
    """
    token = extract_token(authorization)
    if token is None:
        raise Unauthenticated()

    claims = verify_token(token, settings.SECRET_KEY, settings.JWT_ALGORITHM)
    request.state.claims = claims
    return claims


async def product_write_guard(
    request: Request,
    authorization: str | None = Header(None),
) -> dict | None:
    """
    Apply ``require_token`` to product writes only when
    ``settings.PROTECT_PRODUCT_WRITES`` is enabled.
    """
    if not settings.PROTECT_PRODUCT_WRITES:
        return None
    return await require_token(request, authorization)
