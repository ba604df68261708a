"""Database Metadata — SQLAlchemy Base shared by ORM models and migrations.

Invariants:
    - Single async engine per process (initialized via init_db)
"""
