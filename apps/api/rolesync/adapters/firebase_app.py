"""Shared firebase_admin application bootstrap."""

from __future__ import annotations


def ensure_firebase_app(project_id: str | None = None):
    """Initialize the default firebase_admin app once per process and return it."""
    import firebase_admin

    if not firebase_admin._apps:
        options = {"projectId": project_id} if project_id else None
        return firebase_admin.initialize_app(options=options)
    return firebase_admin.get_app()
