"""Services — authorization-aware operations over the stores.

Invariants:
    - Services receive every collaborator through __init__ (no module-level handles)
    - Every failure is raised as a TaskHubError subclass; nothing is swallowed
    - Authorization decisions come from core/authorization.py, never inline role checks

Design Decisions:
    - One class per component (auth, task query, task mutation, user admin, summary)
"""
