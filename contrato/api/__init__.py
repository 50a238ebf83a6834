"""FastAPI routers and dependencies."""

from contrato.api.deps import SessionRegistry, get_factory, get_registry, get_session
from contrato.api.editor import router as editor_router

__all__ = [
    "SessionRegistry",
    "editor_router",
    "get_factory",
    "get_registry",
    "get_session",
]
