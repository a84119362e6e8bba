"""API Layer — FastAPI routes, dependency wiring and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return {"success": ..., ...} JSON envelopes

Design Decisions:
    - Thin routes delegate to services built per request in dependencies.py
"""
