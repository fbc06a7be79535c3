# Middleware package init
"""
QuickNotes Backend: Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [Timeout] → [CORS] → Route

    1. Rate Limit first: reject abusive clients before any processing
    2. Request ID: correlation ID for logs and the X-Request-ID header
    3. Logging: sees the final status, including 504s from the timeout layer
    4. Timeout: bounds the time spent in the route and storage
    5. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
