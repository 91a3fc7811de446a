"""JWT adapters for the TokenIssuer and AuthResolver ports (PyJWT)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import jwt

from storefront.domain.exceptions import UnauthenticatedError
from storefront.domain.model.user import Principal, Role, User
from storefront.domain.ports import AuthResolver, TokenIssuer
from storefront.domain.repository.user_repository import UserRepository

BEARER_SCHEME = "bearer"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JwtTokenIssuer(TokenIssuer):

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=48),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, user: User) -> str:
        issued_at = self._clock()
        payload = {
            "sub": user.id,
            "email": user.email,
            "role": user.role.value,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)


class JwtAuthResolver(AuthResolver):
    """Resolves ``Bearer <token>`` (or a bare token) to a Principal.

    With a ``user_repo`` the subject must still exist and its stored role
    wins over the one in the token, so deletions and demotions take effect
    before the token expires.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        user_repo: UserRepository | None = None,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._user_repo = user_repo

    def resolve(self, credentials: str | None) -> Principal:
        token = _strip_scheme(credentials)
        if not token:
            raise UnauthenticatedError("No token provided")

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise UnauthenticatedError("Token has expired") from None
        except jwt.InvalidTokenError:
            raise UnauthenticatedError("Invalid token") from None

        try:
            role = Role(claims.get("role", Role.USER.value))
        except ValueError:
            raise UnauthenticatedError("Invalid token") from None

        user_id = str(claims["sub"])
        if self._user_repo is not None:
            user = self._user_repo.get_by_id(user_id)
            if user is None:
                raise UnauthenticatedError("User no longer exists")
            role = user.role
        return Principal(user_id=user_id, role=role)


def _strip_scheme(credentials: str | None) -> str:
    if not credentials:
        return ""
    scheme, _, rest = credentials.strip().partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        return rest.strip()
    return credentials.strip()
