"""Login: verify credentials and issue a bearer token."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from app.application.dtos.user import UserResult
from app.application.interfaces.repositories import IUserRepository
from app.domain.enums import PrimaryRole, UserStatus
from app.domain.exceptions import AuthenticationException
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

PasswordVerifier = Callable[[str, str], Awaitable[bool]]
TokenIssuer = Callable[[str, str, PrimaryRole, str | None], tuple[str, int]]


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    expires_in: int
    user: UserResult


class AuthService:
    """Credential check. Unknown email, wrong password and inactive account look the same."""

    def __init__(
        self,
        user_repo: IUserRepository,
        password_verifier: PasswordVerifier,
        token_issuer: TokenIssuer,
    ) -> None:
        self._user_repo = user_repo
        self._verify = password_verifier
        self._issue = token_issuer

    async def login(self, email: str, password: str) -> LoginResult:
        """Return a token for valid, active credentials.

        Raises:
            AuthenticationException: Invalid email or password, or inactive account.
        """
        row = await self._user_repo.get_entity_by_email(email)
        if row is None or not await self._verify(password, row.hashed_password):
            raise AuthenticationException("Invalid email or password")
        if row.status != UserStatus.ACTIVE.value:
            logger.info("Login refused for inactive user %s", row.id)
            raise AuthenticationException("Invalid email or password")

        await self._user_repo.touch_last_active(row.id, utc_now())
        user = await self._user_repo.get_by_id(row.id)
        if user is None:
            raise AuthenticationException("Invalid email or password")
        token, expires_in = self._issue(user.id, user.email, user.role, user.company_id)
        return LoginResult(access_token=token, expires_in=expires_in, user=user)
