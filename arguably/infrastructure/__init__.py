"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - All external calls wrapped with retry/timeout/error mapping
    - Failures surface as ArguablyError subclasses, never raw driver/SDK exceptions

Design Decisions:
    - Resilient wrappers over raw clients: services never see httpx/anthropic/SQLAlchemy errors
"""
