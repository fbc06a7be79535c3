"""
QuickNotes Backend: Note SQLAlchemy Model
===========================================

What:  ORM model for the `notes` table.
Who:   NoteStore builds its statements from it; `Base.metadata.create_all`
       creates the table at startup when it is missing.

Table:
    notes(id INTEGER PRIMARY KEY, content TEXT NOT NULL)

    - id is chosen by the client, so autoincrement is disabled
    - content has no length limit
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from quicknotes.database import Base


class Note(Base):
    """A single note row: a client-assigned integer id and its text."""

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, content={self.content[:30]!r})>"
