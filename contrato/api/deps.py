"""FastAPI dependencies for dependency injection.

Provides reusable dependencies for routes including:
- The component factory
- The in-process editor session registry
"""

import logging

from fastapi import Depends, HTTPException, Request, status

from contrato.core.factory import ComponentFactory
from contrato.editor.session import EditorSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Open editor sessions, keyed by session id."""

    def __init__(self) -> None:
        self._sessions: dict[str, EditorSession] = {}

    def add(self, session: EditorSession) -> EditorSession:
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> EditorSession | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> EditorSession | None:
        return self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)


def get_factory(request: Request) -> ComponentFactory:
    """Dependency for the application's component factory."""
    return request.app.state.factory


def get_registry(request: Request) -> SessionRegistry:
    """Dependency for the application's session registry."""
    return request.app.state.sessions


async def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> EditorSession:
    """Dependency resolving a session id from the path.

    Raises:
        HTTPException: If the session does not exist.
    """
    session = registry.get(session_id)
    if session is None:
        logger.warning(f"Unknown editor session: {session_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Editor session '{session_id}' not found",
        )
    return session
