"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Third-party failures are mapped to GeminiAPIError / ExternalServiceError
    - Clients are process-wide singletons, overridable as FastAPI dependencies

Design Decisions:
    - Resilient wrappers over raw clients: retries and timeouts live in one place
"""
