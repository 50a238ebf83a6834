"""Concrete contract store implementations."""

from contrato.strategies.contract_stores.http import HttpContractStore
from contrato.strategies.contract_stores.memory import MemoryContractStore

__all__ = [
    "HttpContractStore",
    "MemoryContractStore",
]
