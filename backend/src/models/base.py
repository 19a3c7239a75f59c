"""Declarative base and shared column types for DonorHub models"""

from sqlalchemy.orm import declarative_base
from sqlalchemy import TypeDecorator, JSON
from sqlalchemy.dialects.postgresql import JSONB


class TagList(TypeDecorator):
    """Ordered list of free-text tags (donor interests, event types).

    Stored as JSONB on PostgreSQL and plain JSON elsewhere (SQLite in tests).
    Order and duplicates are preserved; tuples and other iterables are
    written as lists.
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, str):
            return [value]
        return [str(tag) for tag in value]


Base = declarative_base()
