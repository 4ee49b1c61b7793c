"""
SQLAlchemy ORM models for database tables.

This package defines the store schema using SQLAlchemy ORM models:

Models:
    base: Base declarative class, shared enums (SourceType, FileLocation)
          and the JSONText column type
    source: Registered sources with their last probe outcome
    processor: Processors that name an input source or processor
    migrations: Startup schema evolution for the sources table

Database Schema:
    The store is a single SQLite file. There is no foreign key between
    processors and sources; references are resolved in the repositories.

Usage:
    from models.source import Source
    from models.processor import Processor
    from models.base import SourceType, FileLocation

Example:
    source = Source(
        name="orders feed",
        type=SourceType.URL.value,
        config={"url": "https://example.com/orders", "method": "GET"}
    )
    session.add(source)
    await session.commit()
"""

__all__ = [
    "Base",
    "SourceType",
    "FileLocation",
    "JSONText",
    "Source",
    "Processor",
]
