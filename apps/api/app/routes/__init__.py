"""Route modules."""

from . import auth, categories, tasks
from .auth import router as auth_router
from .categories import router as categories_router
from .tasks import router as tasks_router

__all__ = ["auth", "auth_router", "categories", "categories_router", "tasks", "tasks_router"]
