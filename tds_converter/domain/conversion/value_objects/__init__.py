"""
Conversion Value Objects

Immutable values passed between parser, encoder, store and use case.
"""

from .conversion_outcome import ConversionFailure, ConversionOutcome, ConversionSuccess
from .raw_input import RawInput
from .tabular_grid import TabularGrid

__all__ = [
    "ConversionFailure",
    "ConversionOutcome",
    "ConversionSuccess",
    "RawInput",
    "TabularGrid",
]
