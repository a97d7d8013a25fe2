"""
Generation Repository Interfaces.

Available Interfaces:
    - GenerationRepositoryProtocol: Generation Store
    - ExecutionRepositoryProtocol: Execution Store
    - AppCatalogProtocol: Read-only model/app catalog
"""

from src.domain.generation.repositories.repository_protocols import (
    AppCatalogProtocol,
    ExecutionRepositoryProtocol,
    GenerationRepositoryProtocol,
)

__all__ = [
    "GenerationRepositoryProtocol",
    "ExecutionRepositoryProtocol",
    "AppCatalogProtocol",
]
