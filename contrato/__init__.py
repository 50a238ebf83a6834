"""Contrato Seguro contract editor engine."""

__version__ = "0.1.0"
