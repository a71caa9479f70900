"""Database Package — declarative Base, timestamp mixin and standalone session factory.

Invariants:
    - Every ORM model inherits from db.base.Base
    - Timestamps are timezone-aware UTC
"""
