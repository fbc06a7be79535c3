"""
QuickNotes Backend: Pydantic Request/Response Schemas
=======================================================

What:  The JSON contract of the notes API.
How:   FastAPI validates request bodies against these models and serializes
       responses through them. Schema errors (wrong types, missing fields,
       ids outside SQLite's INTEGER range) are answered with 422 by FastAPI;
       the empty-content rule is enforced by NoteRepository instead, so it
       can answer 400 like every other business-rule violation.

Wire format:
    {"id": 1, "content": "Hello"}
"""

from typing import Optional

from pydantic import BaseModel, Field

# SQLite stores INTEGER PRIMARY KEY as a signed 64-bit value
NOTE_ID_MIN = -(2**63)
NOTE_ID_MAX = 2**63 - 1


class NoteSchema(BaseModel):
    """
    A note as sent and returned by the API.

    Used as the POST /notes body and for every note in a response.
    """
    id: int = Field(ge=NOTE_ID_MIN, le=NOTE_ID_MAX, description="Client-assigned note id")
    content: str = Field(description="Note body (must not be empty)")

    model_config = {"from_attributes": True}


class NoteUpdate(BaseModel):
    """
    PUT /notes/{id} body.

    The path id is authoritative; a body id is accepted so that clients can
    send back a full note, but it is not used.
    """
    id: Optional[int] = Field(default=None, description="Ignored; the path id wins")
    content: str = Field(description="Replacement note body (must not be empty)")


class HealthResponse(BaseModel):
    """GET /health payload for monitoring and load balancer probes."""
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since the module was loaded")
