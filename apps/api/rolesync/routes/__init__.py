"""Route modules."""

from .admin import router as admin_router
from .comments import router as comments_router
from .internal import router as internal_router

__all__ = ["admin_router", "comments_router", "internal_router"]
