"""Session tokens: HS256 JWTs whose ``sub`` is the user id."""

from datetime import UTC, datetime, timedelta

import jwt
from protean.utils.globals import current_domain

from storefront.errors import Unauthorized


def issue_token(user_id) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(days=current_domain.JWT_TTL_DAYS),
    }
    return jwt.encode(payload, current_domain.JWT_SECRET, algorithm=current_domain.JWT_ALGORITHM)


def decode_token(token: str) -> str:
    """Return the user id carried by ``token``. Raises ``Unauthorized`` otherwise."""
    try:
        payload = jwt.decode(
            token,
            current_domain.JWT_SECRET,
            algorithms=[current_domain.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise Unauthorized("Session expired") from exc
    except jwt.InvalidTokenError as exc:
        raise Unauthorized("Invalid token") from exc

    return payload["sub"]
