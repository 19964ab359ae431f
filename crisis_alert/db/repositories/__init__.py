"""
Per-domain repository modules for database access.

Each module holds plain functions over a SQLAlchemy ``Session``; the database
storage backend composes them into the storage interface.
"""
