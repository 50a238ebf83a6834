"""Concrete renderer implementations."""

from contrato.strategies.renderers.inline import InlineRenderer
from contrato.strategies.renderers.preview import PreviewRenderer
from contrato.strategies.renderers.substitution import SubstitutionRenderer

__all__ = [
    "InlineRenderer",
    "PreviewRenderer",
    "SubstitutionRenderer",
]
