"""Abstract base class for contract storage strategies.

The editor never persists anything itself; drafts and templates live in
the contracts backend. The Strategy Pattern lets the HTTP backend be
swapped for an in-memory store in development and tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class DraftSaveError(RuntimeError):
    """Raised when a draft cannot be saved."""


class TemplateFetchError(RuntimeError):
    """Raised when a template cannot be fetched."""


@dataclass(frozen=True)
class DraftSaveResult:
    """Result of a draft save.

    Attributes:
        contract_id: The contract the draft belongs to.
        field_count: Number of variables saved.
        saved_at: Backend timestamp, when the backend returns one.
    """

    contract_id: str
    field_count: int
    saved_at: str | None = None


class BaseContractStore(ABC):
    """Abstract base class for contract storage strategies.

    Example:
        ```python
        class HttpContractStore(BaseContractStore):
            async def save_draft(self, contract_id, form_data) -> DraftSaveResult:
                # PUT the draft to the backend
                pass
        ```
    """

    @abstractmethod
    async def fetch_template(self, slug: str) -> dict[str, Any]:
        """Fetch a template with its capsule catalog.

        Args:
            slug: Template slug.

        Returns:
            The template payload (see ``TemplatePayload``).

        Raises:
            TemplateFetchError: If the template cannot be fetched.
        """

    @abstractmethod
    async def save_draft(self, contract_id: str, form_data: dict[str, str]) -> DraftSaveResult:
        """Persist the current FormData of a contract.

        Raises:
            DraftSaveError: If the draft cannot be saved.
        """

    @abstractmethod
    async def load_draft(self, contract_id: str) -> dict[str, str] | None:
        """Load a previously saved draft, or None if there is none."""

    async def aclose(self) -> None:
        """Release any open connections."""
