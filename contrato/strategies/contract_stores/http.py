"""HTTP contract store backed by the contracts REST API.

Endpoints:
- ``GET  {base_url}/templates/{slug}`` returns ``{"data": {...template...}}``
- ``PUT  {base_url}/contracts/{id}/draft`` with ``{"form_data": {...}}``
- ``GET  {base_url}/contracts/{id}/draft`` returns ``{"data": {"form_data": {...}}}``
"""

import logging
from typing import Any

import httpx

from contrato.interfaces.contract_store import (
    BaseContractStore,
    DraftSaveError,
    DraftSaveResult,
    TemplateFetchError,
)

logger = logging.getLogger(__name__)


def _data_object(body: Any) -> dict[str, Any]:
    """The ``data`` object of a response body, or an empty dict."""
    data = body.get("data") if isinstance(body, dict) else None
    return data if isinstance(data, dict) else {}


class HttpContractStore(BaseContractStore):
    """Contract store that talks to the contracts backend over HTTP.

    Attributes:
        base_url: Backend base URL, without trailing slash.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            base_url: Backend base URL (e.g., "http://localhost:3000/api").
            timeout: Request timeout in seconds.
            transport: Optional transport, used to mock the backend in tests.
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def fetch_template(self, slug: str) -> dict[str, Any]:
        try:
            response = await self._client.get(f"/templates/{slug}")
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Template fetch failed: {e.response.status_code} for '{slug}'")
            raise TemplateFetchError(
                f"Template '{slug}' could not be fetched: HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Template fetch error for '{slug}': {e}", exc_info=True)
            raise TemplateFetchError(f"Template '{slug}' could not be fetched: {e}") from e

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise TemplateFetchError(f"Template '{slug}' response has no 'data' object")

        logger.info(
            f"Fetched template '{slug}': {len(data.get('template_content') or '')} chars, "
            f"{len(data.get('capsules') or [])} capsules"
        )
        return data

    async def save_draft(self, contract_id: str, form_data: dict[str, str]) -> DraftSaveResult:
        try:
            response = await self._client.put(
                f"/contracts/{contract_id}/draft",
                json={"form_data": form_data},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Draft save failed: {e.response.status_code} for contract {contract_id}")
            raise DraftSaveError(
                f"Draft for contract {contract_id} was rejected: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Draft save error for contract {contract_id}: {e}", exc_info=True)
            raise DraftSaveError(f"Draft for contract {contract_id} could not be saved: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None
        saved_at = _data_object(body).get("saved_at")
        if not isinstance(saved_at, str):
            saved_at = None

        logger.info(f"Saved draft for contract {contract_id} ({len(form_data)} fields)")
        return DraftSaveResult(contract_id=contract_id, field_count=len(form_data), saved_at=saved_at)

    async def load_draft(self, contract_id: str) -> dict[str, str] | None:
        try:
            response = await self._client.get(f"/contracts/{contract_id}/draft")
            if response.status_code == httpx.codes.NOT_FOUND:
                return None
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Draft load error for contract {contract_id}: {e}", exc_info=True)
            raise DraftSaveError(f"Draft for contract {contract_id} could not be loaded: {e}") from e

        form_data = _data_object(body).get("form_data")
        if not isinstance(form_data, dict):
            return None
        return {str(key): "" if value is None else str(value) for key, value in form_data.items()}

    async def aclose(self) -> None:
        await self._client.aclose()
