"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to instantiate
different strategy implementations at runtime based on
configuration or environment variables.
"""

import logging
from typing import cast

from contrato.core.config import Settings, get_settings
from contrato.interfaces.contract_store import BaseContractStore
from contrato.interfaces.renderer import BaseTemplateRenderer
from contrato.strategies.contract_stores import HttpContractStore, MemoryContractStore
from contrato.strategies.renderers import InlineRenderer, PreviewRenderer

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        settings = get_settings()
        factory = ComponentFactory(settings)

        renderer = factory.get_renderer()
        store = factory.get_contract_store()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._renderer_cache: BaseTemplateRenderer | None = None
        self._contract_store_cache: BaseContractStore | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_renderer(self, renderer_type: str | None = None) -> BaseTemplateRenderer:
        """Get a renderer instance based on the specified type.

        Args:
            renderer_type: 'inline' or 'preview'. If None, uses settings.

        Returns:
            A BaseTemplateRenderer implementation instance.

        Raises:
            ValueError: If the renderer type is unknown.
        """
        renderer_type = renderer_type or self._settings.renderer_type
        is_default = renderer_type == self._settings.renderer_type
        if not is_default or self._renderer_cache is None:
            logger.info(f"Instantiating renderer: {renderer_type}")

            heading = self._settings.additional_clauses_heading
            match renderer_type:
                case "inline":
                    renderer = InlineRenderer(clauses_heading=heading)
                case "preview":
                    renderer = PreviewRenderer(clauses_heading=heading)
                case _:
                    raise ValueError(
                        f"Unknown renderer type: {renderer_type}. "
                        "Valid options: 'inline', 'preview'"
                    )

            if is_default:
                self._renderer_cache = renderer
            return renderer

        return self._renderer_cache

    def get_inline_renderer(self) -> InlineRenderer:
        """Renderer for editable surfaces, regardless of the configured default."""
        return cast(InlineRenderer, self.get_renderer("inline"))

    def get_contract_store(self, store_type: str | None = None) -> BaseContractStore:
        """Get a contract store instance based on the specified type.

        Args:
            store_type: 'memory' or 'http'. If None, uses settings.

        Returns:
            A BaseContractStore implementation instance.

        Raises:
            ValueError: If the store type is unknown.
        """
        store_type = store_type or self._settings.contract_store_type
        is_default = store_type == self._settings.contract_store_type
        if not is_default or self._contract_store_cache is None:
            logger.info(f"Instantiating contract store: {store_type}")

            match store_type:
                case "memory":
                    store = MemoryContractStore()
                case "http":
                    store = HttpContractStore(
                        base_url=self._settings.api_base_url,
                        timeout=self._settings.api_timeout_seconds,
                    )
                case _:
                    raise ValueError(
                        f"Unknown contract store type: {store_type}. "
                        "Valid options: 'memory', 'http'"
                    )

            if is_default:
                self._contract_store_cache = store
            return store

        return self._contract_store_cache

    async def aclose(self) -> None:
        """Close cached components that hold connections."""
        if self._contract_store_cache is not None:
            await self._contract_store_cache.aclose()
            self._contract_store_cache = None
