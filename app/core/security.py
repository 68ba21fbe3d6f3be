"""Password hashing and signed token helpers."""

import base64
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
import structlog
from jose import JWTError, jwt

logger = structlog.get_logger(__name__)


class CredentialVault:
    """One-way salted password hashing backed by bcrypt."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    @staticmethod
    def _digest(password: str) -> bytes:
        # bcrypt only reads 72 bytes; a fixed-size digest keeps every byte significant
        return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._digest(password), salt).decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash. Malformed hashes never match."""
        try:
            return bcrypt.checkpw(self._digest(password), password_hash.encode("ascii"))
        except (ValueError, UnicodeEncodeError):
            return False


class TokenCodec:
    """Signs and verifies compact claim sets carrying an expiry."""

    def __init__(self, secret_key: str, algorithm: str = "HS256") -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm

    def sign(self, claims: dict[str, Any], ttl: timedelta) -> str:
        """
        Sign ``claims`` into a token valid for ``ttl``.

        ``exp`` and ``iat`` are set here and override any caller values.
        """
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + ttl
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[dict[str, Any]]:
        """Return the claims of a valid token, or None. Never raises."""
        if not token:
            return None
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug("token_rejected", reason=str(e))
            return None
        except Exception as e:
            logger.warning("token_decode_error", error=str(e))
            return None

    def create_access_token(self, user_id: Any, ttl: timedelta) -> str:
        """Bearer token for ``user_id`` with the ``access`` discriminator."""
        return self.sign({"sub": str(user_id), "type": "access"}, ttl)
