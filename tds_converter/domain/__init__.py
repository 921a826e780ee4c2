"""
Domain Layer - Core Conversion Logic

Heart of the TDS converter. Contains the parsing rules, value objects and
domain service contracts. Framework-independent and highly testable.

Architecture:
    - Clean Architecture: Domain Layer is the center, no external dependencies
    - Domain-Driven Design: Value Objects, Services, Protocols
    - Dependency Inversion: Domain defines interfaces, Infrastructure implements

Subdomains:
    - conversion: Delimited text -> TabularGrid -> workbook
    - shared: Cross-subdomain concepts (exceptions)

Usage:
    >>> from tds_converter.domain import DelimitedTextParser, TabularGrid
    >>> from tds_converter.domain.conversion.services import derive_stored_name
"""

# Conversion Subdomain
from .conversion import (
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
    DelimitedTextParser,
    RawInput,
    TabularGrid,
    WorkbookEncoderProtocol,
    derive_stored_name,
)

# Shared Domain
from .shared import DomainException

__all__ = [
    "ConversionFailure",
    "ConversionOutcome",
    "ConversionSuccess",
    "DelimitedTextParser",
    "DomainException",
    "RawInput",
    "TabularGrid",
    "WorkbookEncoderProtocol",
    "derive_stored_name",
]
