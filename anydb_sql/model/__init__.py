"""Extended `SQLAlchemy Core <https://docs.sqlalchemy.org/en/20/core/>`_
tables and queries.

Tables gain relation traversal, queries gain execution and result shaping.
"""
