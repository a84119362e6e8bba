"""Functional Core — pure domain rules shared by all services.

Invariants:
    - No IO, no async, no DB access anywhere in this package
    - Authorization, pagination and patch narrowing are plain functions over values

Design Decisions:
    - Pure functions over service methods: testable without fixtures or mocks
"""
