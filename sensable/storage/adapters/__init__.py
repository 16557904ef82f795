"""Database adapters."""

from .base import DatabaseAdapter
from .sqlalchemy_adapter import SQLAlchemyAdapter, SQLAlchemyConnection

__all__ = [
    'DatabaseAdapter',
    'SQLAlchemyAdapter',
    'SQLAlchemyConnection',
]
