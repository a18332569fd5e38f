"""
Catalogue Test Suite.

This package contains:
- unit/: Unit tests (schema, query compilation, access, storage helpers)
- integration/: Integration tests (CRUD engines on a temporary SQLite file)
"""
