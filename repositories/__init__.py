"""
Repositories wrapping store access for each record kind.

Usage:
    from repositories.sources import SourceRepository
    from repositories.processors import ProcessorRepository
"""

__all__ = [
    "SourceRepository",
    "ProcessorRepository",
]
