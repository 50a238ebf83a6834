"""Concrete strategy implementations."""

from contrato.strategies.contract_stores import (
    HttpContractStore,
    MemoryContractStore,
)
from contrato.strategies.renderers import (
    InlineRenderer,
    PreviewRenderer,
)

__all__ = [
    "HttpContractStore",
    "InlineRenderer",
    "MemoryContractStore",
    "PreviewRenderer",
]
