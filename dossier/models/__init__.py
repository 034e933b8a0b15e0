"""SQLAlchemy models for the application."""

from .person import Person

__all__ = [
    "Person",
]
