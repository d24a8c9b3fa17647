"""Identity verification: stage one of the authorization chain.

Validates the bearer token, loads the account it names and rejects missing
or deactivated accounts. The loaded account is published on request.state
(read by the audit middleware).
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import UserResult
from app.domain.exceptions import AuthenticationException
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security import verify_token
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResult:
    """Authenticated, active account for this request.

    Side effect: stamps last_active on the account (committed on the read
    session right away so it never holds a write lock for the request).

    Raises:
        AuthenticationException: Missing, invalid or expired token; unknown
            or inactive account.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Authentication required")
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        logger.debug("Rejected bearer token: %s", e)
        raise AuthenticationException("Invalid or expired token") from e

    user_repo = UserRepository(db)
    user = await user_repo.get_by_id(str(payload["sub"]))
    if user is None or not user.is_active:
        raise AuthenticationException("User not found or inactive")

    await user_repo.touch_last_active(user.id, utc_now())
    await db.commit()

    request.state.current_user = user
    return user


CurrentUser = Annotated[UserResult, Depends(get_current_user)]
