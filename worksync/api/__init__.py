"""API Layer — FastAPI routes and error handlers over the Domain Store.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses

Design Decisions:
    - Thin routes delegate to the store (functional core, imperative shell)
"""
