"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from secrets import compare_digest
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from rolesync.adapters.auth import (
    AuthVerificationError,
    FirebaseTokenVerifier,
    MockTokenVerifier,
    TokenVerifier,
)
from rolesync.adapters.identity import FirebaseIdentityStore, IdentityStore
from rolesync.adapters.profiles import FirestoreProfileStore, ProfileStore
from rolesync.core.config import Settings, get_settings
from rolesync.core.logging_safety import safe_account_ref, safe_log_identifier
from rolesync.errors import ApiError
from rolesync.repositories.memory import InMemoryCommentStore, InMemoryIdentityStore, InMemoryProfileStore
from rolesync.schemas.auth import AuthContext
from rolesync.services.admin_gateway import AdminCommandGateway
from rolesync.services.comments import CommentService
from rolesync.services.directory import DirectorySynchronizer
from rolesync.services.accounts import AccountRegistrationService
from rolesync.services.lifecycle import LifecycleEventService, deliver_in_process

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
event_secret_scheme = APIKeyHeader(
    name="X-Event-Secret",
    auto_error=False,
    scheme_name="lifecycleEventSecret",
)
logger = logging.getLogger(__name__)


def _auth_error(message: str) -> ApiError:
    return ApiError(status_code=401, code="UNAUTHORIZED", message=message)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_token_verifier(settings: Annotated[Settings, Depends(get_settings)]) -> TokenVerifier:
    """Resolve provider adapter from configuration."""
    if settings.auth_provider == "firebase":
        return FirebaseTokenVerifier(
            project_id=settings.firebase_project_id,
            audience=settings.firebase_audience,
        )
    return MockTokenVerifier()


async def get_auth_context(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> AuthContext:
    """Validate bearer token and attach the caller's auth context to the request."""
    correlation_id = _request_correlation_id(request)
    safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=invalid_or_missing_bearer",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_error("Invalid or missing bearer token")

    try:
        auth = verifier.verify_token(credentials.credentials)
    except AuthVerificationError as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_verification_failed",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_error(str(exc) or "Invalid bearer token") from exc

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s subject_id=%s role=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_account_ref(auth.subject_id),
        auth.role,
    )
    request.state.auth_context = auth
    return auth


async def require_event_secret(
    request: Request,
    event_secret: Annotated[str | None, Security(event_secret_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Validate the shared secret that authenticates lifecycle event deliveries."""
    correlation_id = _request_correlation_id(request)
    safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
    if event_secret is None or not compare_digest(event_secret, settings.event_secret):
        logger.warning(
            "event.auth_rejected correlation_id=%s method=%s path=%s reason=invalid_event_secret",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_error("Invalid event authentication")


def get_identity_store(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> IdentityStore:
    store = request.app.state.identity_store
    if store is None:
        if settings.store_backend == "firebase":
            store = FirebaseIdentityStore(project_id=settings.firebase_project_id)
        else:
            store = InMemoryIdentityStore()
        request.app.state.identity_store = store
    if isinstance(store, InMemoryIdentityStore) and not request.app.state.in_process_events:
        deliver_in_process(store, get_profile_store(request, settings))
        request.app.state.in_process_events = True
    return store


def get_profile_store(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ProfileStore:
    store = request.app.state.profile_store
    if store is None:
        if settings.store_backend == "firebase":
            store = FirestoreProfileStore(
                collection=settings.profile_collection,
                project_id=settings.firebase_project_id,
            )
        else:
            store = InMemoryProfileStore()
        request.app.state.profile_store = store
    return store


def get_comment_store(request: Request) -> InMemoryCommentStore:
    return request.app.state.comment_store


def get_directory_synchronizer(
    identity_store: Annotated[IdentityStore, Depends(get_identity_store)],
    profile_store: Annotated[ProfileStore, Depends(get_profile_store)],
) -> DirectorySynchronizer:
    return DirectorySynchronizer(identity_store, profile_store)


def get_admin_gateway(
    synchronizer: Annotated[DirectorySynchronizer, Depends(get_directory_synchronizer)],
) -> AdminCommandGateway:
    return AdminCommandGateway(synchronizer)


def get_lifecycle_service(
    synchronizer: Annotated[DirectorySynchronizer, Depends(get_directory_synchronizer)],
) -> LifecycleEventService:
    return LifecycleEventService(synchronizer)


def get_comment_service(store: Annotated[InMemoryCommentStore, Depends(get_comment_store)]) -> CommentService:
    return CommentService(store)


def get_account_registration_service(
    identity_store: Annotated[IdentityStore, Depends(get_identity_store)],
) -> AccountRegistrationService:
    return AccountRegistrationService(identity_store)
