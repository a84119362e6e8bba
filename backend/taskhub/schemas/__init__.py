"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Wire format is camelCase; Python attributes are snake_case
    - No response schema carries password_hash

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - Request schemas convert themselves into core patches (to_patch), using
      model_fields_set to tell "absent" from "explicit null"
"""
