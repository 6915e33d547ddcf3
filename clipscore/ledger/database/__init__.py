"""
Ledger database: schema, Alembic migrations, the async DBM, and the
repository queries handlers build on.
"""
from .dbm import DBM
from .init import initialize

__all__ = ["initialize", "DBM"]
