"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/
    - All external failures mapped to TaskHubError subclasses (core/errors.py)

Design Decisions:
    - Thin wrappers over raw clients (passlib, PyJWT, Anthropic, SQLAlchemy):
      services depend on the ports in core/ports.py, not on these libraries
"""
