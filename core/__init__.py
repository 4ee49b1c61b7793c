"""
Core utilities and configuration for the source registry.

This package provides foundational components used throughout the service:

Modules:
    config: Application configuration and environment variable management
    database: Connection manager (engine, session factory, lifecycle)
    exceptions: Custom exception hierarchy mapped onto HTTP status codes
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.database import Database
    from core.exceptions import ResourceNotFoundError, FileTooLargeError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Open the store and run the schema evolution procedure
    database = Database(settings.DATABASE_URL)
    await database.init()

    async with database.session() as session:
        # Perform database operations
        pass

    await database.dispose()
"""

__all__ = [
    "settings",
    "Settings",
    "Database",
    "setup_logging",
    # Exceptions
    "ReporterException",
    "ValidationError",
    "ResourceNotFoundError",
    "PermissionDeniedError",
    "FileTooLargeError",
    "NotImplementedFeatureError",
    "FileReadError",
    "DatabaseError",
    "SchemaMigrationError",
]
