"""Abstract base classes for editor strategies."""

from contrato.interfaces.contract_store import (
    BaseContractStore,
    DraftSaveError,
    DraftSaveResult,
    TemplateFetchError,
)
from contrato.interfaces.renderer import BaseTemplateRenderer, RenderResult

__all__ = [
    "BaseContractStore",
    "BaseTemplateRenderer",
    "DraftSaveError",
    "DraftSaveResult",
    "RenderResult",
    "TemplateFetchError",
]
