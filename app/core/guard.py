"""Identity resolution and role checks for incoming requests.

The guard never raises for a rejected caller. It returns a ``GuardResult``
that either holds the authorized user or the typed error explaining the
rejection; ``app.dependencies`` turns rejections into HTTP responses.
"""

from dataclasses import dataclass
from typing import Iterable, Optional
from uuid import UUID

import structlog
from starlette.requests import Request

from app.core.exceptions import (
    AppError,
    AuthenticationRequired,
    InsufficientPermissions,
    SessionExpired,
)
from app.core.security import TokenCodec
from app.models.user import ADMIN_ROLES, EMPLOYER_ROLES, JOB_SEEKER_ROLES, User
from app.services.session_store import SessionStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class GuardResult:
    """Outcome of a guard check: an identity or a rejection, never both."""

    identity: Optional[User] = None
    error: Optional[AppError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.identity is not None

    @classmethod
    def authorized(cls, identity: User) -> "GuardResult":
        return cls(identity=identity)

    @classmethod
    def rejected(cls, error: AppError) -> "GuardResult":
        return cls(error=error)


class AccessGuard:
    """Resolves the caller from the session cookie and checks roles."""

    def __init__(
        self,
        store: SessionStore,
        codec: TokenCodec,
        cookie_name: str = "session",
    ) -> None:
        self.store = store
        self.codec = codec
        self.cookie_name = cookie_name

    @staticmethod
    def _bearer_token(request: Request) -> Optional[str]:
        authorization = request.headers.get("authorization", "")
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    async def _user_from_access_token(self, token: str) -> Optional[User]:
        claims = self.codec.verify(token)
        if not claims or claims.get("type") != "access":
            return None
        try:
            user_id = UUID(str(claims.get("sub")))
        except ValueError:
            return None
        return await self.store.get_active_user(user_id)

    async def require_auth(self, request: Request) -> GuardResult:
        """Resolve the caller's identity from the request credentials."""
        session_id = request.cookies.get(self.cookie_name)
        if session_id:
            user = await self.store.validate_session(session_id)
        else:
            token = self._bearer_token(request)
            if token is None:
                return GuardResult.rejected(AuthenticationRequired())
            user = await self._user_from_access_token(token)

        if user is None:
            return GuardResult.rejected(SessionExpired())
        return GuardResult.authorized(user)

    async def require_role(self, request: Request, allowed_roles: Iterable[str]) -> GuardResult:
        """Authenticate, then confirm the caller holds one of ``allowed_roles``."""
        allowed = frozenset(allowed_roles)
        result = await self.require_auth(request)
        if not result.ok:
            return result

        identity = result.identity
        if identity.role not in allowed:
            logger.info(
                "access_denied",
                user_id=str(identity.id),
                role=identity.role,
                required=sorted(allowed),
                path=request.url.path,
            )
            return GuardResult.rejected(InsufficientPermissions(allowed, identity.role))
        return result

    async def require_job_seeker(self, request: Request) -> GuardResult:
        return await self.require_role(request, JOB_SEEKER_ROLES)

    async def require_employer(self, request: Request) -> GuardResult:
        return await self.require_role(request, EMPLOYER_ROLES)

    async def require_admin(self, request: Request) -> GuardResult:
        return await self.require_role(request, ADMIN_ROLES)
