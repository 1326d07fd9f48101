"""Mock auth verifier for local development and tests."""

from rolesync.adapters.auth.base import AuthVerificationError, TokenVerifier
from rolesync.schemas.auth import AuthContext


class MockTokenVerifier(TokenVerifier):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<uid>`` (no role claim)
    - ``test:<uid>:<role>``
    """

    def verify_token(self, token: str) -> AuthContext:
        parts = token.split(":")
        if len(parts) not in (2, 3) or parts[0] != "test":
            raise AuthVerificationError("Invalid bearer token")

        subject_id = parts[1].strip()
        role = parts[2].strip() if len(parts) == 3 else None

        if not subject_id:
            raise AuthVerificationError("Bearer token missing user identity")

        return AuthContext(subject_id=subject_id, role=role or None)


__all__ = ["MockTokenVerifier"]
