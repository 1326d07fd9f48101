"""Authentication provider interfaces."""

from abc import ABC, abstractmethod

from rolesync.schemas.auth import AuthContext


class AuthVerificationError(Exception):
    """Raised when a token cannot be verified or normalized."""


class TokenVerifier(ABC):
    """Provider-neutral token verification interface."""

    @abstractmethod
    def verify_token(self, token: str) -> AuthContext:
        """Verify token and return the caller's auth context."""


__all__ = ["AuthVerificationError", "TokenVerifier"]
