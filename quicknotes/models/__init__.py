"""ORM models. Importing this package registers every table with Base.metadata."""

from quicknotes.models.note import Note

__all__ = ["Note"]
