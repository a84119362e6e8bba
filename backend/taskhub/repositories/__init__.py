"""Repositories — SQLAlchemy implementations of the Identity and Task stores.

Invariants:
    - Only module that builds SQL; services see ORM rows or TaskView tuples
    - Every query is parameterized through SQLAlchemy Core/ORM constructs
    - Each write commits its own single-row statement
"""
