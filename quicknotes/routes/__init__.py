# Routes package init
"""
QuickNotes Backend: API Routes Package
========================================

Route Inventory:
    - notes.py:   /notes, /notes/{id}, /search/{query}
    - static.py:  /                      (client page)
    - health.py:  /health                (service health check)

Routes stay thin: extract parameters, call the repository, pick the
status code. Business rules live in services/.
"""
