"""API Layer — FastAPI routes, middleware, error handlers and Socket.IO events.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return the {success, message?, data?} envelope (audio streams excepted)

Design Decisions:
    - Thin routes delegate to services; services never build HTTP responses
"""
