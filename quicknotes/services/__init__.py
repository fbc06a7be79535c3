# Services package init
"""
QuickNotes Backend: Services Layer
====================================

Service Inventory:
    - NoteStore:       SQL statements and driver-error translation
    - NoteRepository:  validation and the per-operation error policy
    - AssetService:    reads the static client page

Services know nothing about HTTP, so they are tested without a server.
"""
