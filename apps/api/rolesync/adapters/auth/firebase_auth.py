"""Firebase Auth token verifier adapter."""

from __future__ import annotations

from rolesync.adapters.auth.base import AuthVerificationError, TokenVerifier
from rolesync.adapters.firebase_app import ensure_firebase_app
from rolesync.schemas.auth import AuthContext


class FirebaseTokenVerifier(TokenVerifier):
    """Verifies Firebase ID tokens and reads the ``role`` custom claim."""

    def __init__(self, project_id: str | None, audience: str | None) -> None:
        self._project_id = project_id
        self._audience = audience

    def verify_token(self, token: str) -> AuthContext:
        try:
            from firebase_admin import auth as firebase_auth
        except ImportError as exc:  # pragma: no cover - depends on optional package
            raise AuthVerificationError("Firebase auth verifier is unavailable") from exc

        ensure_firebase_app(self._project_id)

        try:
            # Revocation check also rejects tokens of accounts disabled since issuance.
            decoded = firebase_auth.verify_id_token(token, check_revoked=True)
        except Exception as exc:  # pragma: no cover - provider exception surface
            raise AuthVerificationError("Invalid bearer token") from exc

        if self._audience and decoded.get("aud") != self._audience:
            raise AuthVerificationError("Invalid bearer token audience")

        if self._project_id:
            issuer = str(decoded.get("iss", ""))
            audience = str(decoded.get("aud", ""))
            if self._project_id not in issuer and audience != self._project_id:
                raise AuthVerificationError("Invalid bearer token issuer")

        subject_id = str(decoded.get("uid") or decoded.get("sub") or "").strip()
        if not subject_id:
            raise AuthVerificationError("Bearer token missing user identity")

        role = decoded.get("role")
        return AuthContext(subject_id=subject_id, role=str(role).strip() if role else None)


__all__ = ["FirebaseTokenVerifier"]
