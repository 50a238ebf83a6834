"""In-memory contract store for development and tests."""

import logging
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any

from contrato.interfaces.contract_store import (
    BaseContractStore,
    DraftSaveResult,
    TemplateFetchError,
)

logger = logging.getLogger(__name__)


class MemoryContractStore(BaseContractStore):
    """Keeps templates and drafts in process memory."""

    def __init__(self, templates: dict[str, dict[str, Any]] | None = None) -> None:
        self._templates = dict(templates or {})
        self._drafts: dict[str, dict[str, str]] = {}
        self.save_count = 0

    def add_template(self, slug: str, payload: dict[str, Any]) -> None:
        self._templates[slug] = payload

    async def fetch_template(self, slug: str) -> dict[str, Any]:
        try:
            return deepcopy(self._templates[slug])
        except KeyError:
            raise TemplateFetchError(f"Template not found: {slug}") from None

    async def save_draft(self, contract_id: str, form_data: dict[str, str]) -> DraftSaveResult:
        self._drafts[contract_id] = dict(form_data)
        self.save_count += 1
        logger.info(f"Saved draft for contract {contract_id} ({len(form_data)} fields)")
        return DraftSaveResult(
            contract_id=contract_id,
            field_count=len(form_data),
            saved_at=datetime.now(timezone.utc).isoformat(),
        )

    async def load_draft(self, contract_id: str) -> dict[str, str] | None:
        draft = self._drafts.get(contract_id)
        return dict(draft) if draft is not None else None
