"""Routers package for the TaskZM API."""

from .series import router as series_router
from .tasks import router as tasks_router

__all__ = ["series_router", "tasks_router"]
