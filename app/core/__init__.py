"""Core application modules."""

from app.core.security import CredentialVault, TokenCodec
from app.core.state_machine import VALID_TRANSITIONS, normalize_status, validate_transition

__all__ = [
    "CredentialVault",
    "TokenCodec",
    "VALID_TRANSITIONS",
    "normalize_status",
    "validate_transition",
]
