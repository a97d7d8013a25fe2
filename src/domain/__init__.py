"""
Domain Layer - Core Business Logic

Heart of the GenRelay service. Contains the generation and app execution
lifecycle rules, catalog definitions, completion events and repository
interfaces. Framework-independent and highly testable.

Architecture:
    - Clean Architecture: Domain Layer is the center, no external dependencies
      apart from pydantic for event models
    - Domain-Driven Design: Entities, Value Objects, Services, Repositories
    - Dependency Inversion: Domain defines interfaces, Infrastructure implements

Subdomains:
    - generation: Generations, app executions, catalog
    - shared: Cross-subdomain concepts (exceptions)

Usage:
    >>> from src.domain import Generation, AppExecution, DomainException
    >>> from src.domain.generation.entities import AppDefinition
"""

# Generation Subdomain
from .generation import (
    AppExecution,
    ExecutionRepositoryProtocol,
    ExecutionStatus,
    Generation,
    GenerationRepositoryProtocol,
    GenerationStatus,
)

# Shared Domain
from .shared import DomainException

__all__ = [
    # Generation Subdomain
    "Generation",
    "AppExecution",
    "GenerationStatus",
    "ExecutionStatus",
    "GenerationRepositoryProtocol",
    "ExecutionRepositoryProtocol",
    # Shared Domain
    "DomainException",
]
