"""FastAPI application entrypoint."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from rolesync.adapters.identity import IdentityStore
from rolesync.adapters.profiles import ProfileStore
from rolesync.errors import ApiError
from rolesync.repositories.memory import InMemoryCommentStore, InMemoryIdentityStore
from rolesync.routes import admin_router, comments_router, internal_router
from rolesync.schemas.error import ErrorResponse
from rolesync.services.lifecycle import deliver_in_process


_OPENAPI_RESPONSE_CODES: dict[str, dict[str, set[str]]] = {
    "/api/v1/admin/users": {"get": {"200", "401", "403", "500"}},
    "/api/v1/admin/users/role": {"post": {"200", "400", "401", "403", "500"}},
    "/api/v1/admin/users/status": {"post": {"200", "400", "401", "403", "500"}},
    "/api/v1/admin/users/delete": {"post": {"200", "400", "401", "403", "500"}},
    "/api/v1/internal/accounts": {"post": {"201", "400", "401", "500"}},
    "/api/v1/internal/accounts/created": {"post": {"204", "400", "401", "500"}},
    "/api/v1/internal/accounts/deleted": {"post": {"204", "400", "401", "500"}},
    "/api/v1/comments": {"get": {"200", "400"}, "post": {"200"}},
}

_EVENT_VALIDATION_PATHS: set[tuple[str, str]] = {
    ("POST", "/api/v1/internal/accounts"),
    ("POST", "/api/v1/internal/accounts/created"),
    ("POST", "/api/v1/internal/accounts/deleted"),
}


def _apply_contract_response_codes(schema: dict) -> None:
    """Limit documented response codes to the ones each route can actually return."""
    for path, methods in _OPENAPI_RESPONSE_CODES.items():
        path_item = schema.get("paths", {}).get(path)
        if not path_item:
            continue

        for method, allowed_codes in methods.items():
            operation = path_item.get(method)
            if not operation:
                continue

            responses = operation.setdefault("responses", {})
            for status_code in list(responses.keys()):
                if status_code not in allowed_codes:
                    responses.pop(status_code, None)

            for status_code in sorted(allowed_codes):
                responses.setdefault(status_code, {"description": "See API contract"})


def create_app(
    *,
    identity_store: IdentityStore | None = None,
    profile_store: ProfileStore | None = None,
    comment_store: InMemoryCommentStore | None = None,
) -> FastAPI:
    """Build the API. Stores left as ``None`` are created from settings on first use.

    An in-memory identity store delivers its lifecycle events to the directory
    in process, standing in for the platform triggers.
    """
    app = FastAPI(title="Rolesync Directory API", version="1.0.0")
    app.state.identity_store = identity_store
    app.state.profile_store = profile_store
    app.state.comment_store = comment_store or InMemoryCommentStore()
    app.state.in_process_events = False
    if isinstance(identity_store, InMemoryIdentityStore) and profile_store is not None:
        deliver_in_process(identity_store, profile_store)
        app.state.in_process_events = True

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        route = request.scope.get("route")
        route_path = getattr(route, "path", request.url.path)
        if (request.method.upper(), route_path) in _EVENT_VALIDATION_PATHS:
            payload = ErrorResponse(code="INVALID_ARGUMENT", message="Invalid internal request payload")
            return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))

        return await request_validation_exception_handler(request, exc)

    api_prefix = "/api/v1"
    app.include_router(admin_router, prefix=api_prefix)
    app.include_router(internal_router, prefix=api_prefix)
    app.include_router(comments_router, prefix=api_prefix)

    def custom_openapi() -> dict:
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        _apply_contract_response_codes(schema)
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app


app = create_app()
