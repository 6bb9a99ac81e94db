"""Infrastructure Layer — database session management and cross-cutting concerns.

Invariants:
    - Infrastructure never imports domain logic beyond core/errors
    - Driver exceptions are mapped to DatabaseError before leaving this layer
"""
