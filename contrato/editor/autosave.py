"""Debounced auto-save of contract drafts."""

import asyncio
import logging

from contrato.interfaces.contract_store import BaseContractStore, DraftSaveError, DraftSaveResult

logger = logging.getLogger(__name__)


class AutoSaver:
    """Saves FormData snapshots after a quiet period.

    The first snapshot seen is taken as the already-saved baseline. Every new
    snapshot cancels the pending save; unchanged snapshots are not saved.
    Outside a running event loop the snapshot is kept until ``flush()``.
    """

    def __init__(self, store: BaseContractStore, delay: float = 3.0) -> None:
        self._store = store
        self._delay = delay
        self._baseline: dict[str, str] | None = None
        self._pending: asyncio.Task | None = None
        self._pending_snapshot: tuple[str, dict[str, str]] | None = None
        self.last_result: DraftSaveResult | None = None
        self.last_error: DraftSaveError | None = None

    @property
    def has_pending(self) -> bool:
        return self._pending_snapshot is not None

    def schedule(self, contract_id: str, form_data: dict[str, str]) -> asyncio.Task | None:
        """Schedule a save of ``form_data`` after the debounce delay."""
        snapshot = dict(form_data)
        if self._baseline is None:
            self._baseline = snapshot
            return None

        self.cancel()
        if snapshot == self._baseline:
            return None

        self._pending_snapshot = (contract_id, snapshot)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.info(f"No running event loop; draft for contract {contract_id} waits for flush()")
            return None

        self._pending = loop.create_task(self._save_later(contract_id, snapshot))
        return self._pending

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self._pending_snapshot = None

    async def flush(self) -> DraftSaveResult | None:
        """Save the pending snapshot now, if there is one."""
        if self._pending_snapshot is None:
            return None
        contract_id, snapshot = self._pending_snapshot
        self.cancel()
        return await self._save(contract_id, snapshot)

    async def _save_later(self, contract_id: str, snapshot: dict[str, str]) -> None:
        await asyncio.sleep(self._delay)
        self._pending_snapshot = None
        await self._save(contract_id, snapshot)

    async def _save(self, contract_id: str, snapshot: dict[str, str]) -> DraftSaveResult | None:
        try:
            result = await self._store.save_draft(contract_id, snapshot)
        except DraftSaveError as e:
            logger.error(f"Auto-save failed for contract {contract_id}: {e}")
            self.last_error = e
            return None

        self._baseline = snapshot
        self.last_result = result
        self.last_error = None
        return result
