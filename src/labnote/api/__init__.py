"""API routers for LabNote."""

from .auth import router as auth_router
from .entries import router as entries_router
from .errors import register_exception_handlers
from .health import router as health_router
from .projects import router as projects_router
from .templates import router as templates_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "users_router",
    "entries_router",
    "projects_router",
    "templates_router",
    "health_router",
    "register_exception_handlers",
]
