"""
API Layer - FastAPI Presentation Layer

Responsibility:
    HTTP and WebSocket interface for the application. Handles requests,
    responses, and queues work on Celery. No business logic.

Contains:
    - FastAPI routers (generations, apps, notifications)
    - Request-scoped dependencies (caller identity, use cases, handlers)
    - Middleware configuration (CORS, logging)
    - Global exception handlers

Does NOT contain:
    - Business logic (belongs to Domain layer)
    - Orchestration (belongs to Application layer)
    - Redis or provider access (belongs to Infrastructure layer)
"""
