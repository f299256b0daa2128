"""Services

Each module exposes plain functions that take a SQLAlchemy ``Session`` as
their first argument; callers own the transaction (see ``data.db.get_session``).
"""
