"""
Shared Utilities

Responsibility:
    Cross-cutting concerns used across all layers.

Contains:
    - container: Composition root wiring stores, services and adapters
    - utils: Generic helpers (memory-stamped logging)

Does NOT contain:
    - Business logic
    - Infrastructure implementations
"""
