"""Request dependencies: the authenticated user."""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from protean.utils.globals import current_domain

from storefront.errors import Unauthorized
from storefront.identity.tokens import decode_token

bearer = HTTPBearer(auto_error=False)


async def current_user_id(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> str:
    """User id from the session cookie, or from an ``Authorization: Bearer`` header."""
    token = request.cookies.get(current_domain.AUTH_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise Unauthorized()

    return decode_token(token)
