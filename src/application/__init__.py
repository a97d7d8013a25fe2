"""
Application Layer - Use Cases and Orchestration

Responsibility:
    Coordinates the flow of data between API and Domain layers.
    Handles asynchronous task processing with Celery.

Contains:
    - commands/: CQRS write operations
    - queries/: CQRS read operations
    - services/: Use cases and orchestration services
    - ports/: Protocols implemented by the Infrastructure Layer
    - tasks/: Celery async tasks
    - models: Result DTOs shared by commands, queries and the API

Does NOT contain:
    - Domain business rules (belongs to Domain layer)
    - HTTP handling (belongs to API layer)
    - Infrastructure details (belongs to Infrastructure layer)
"""
