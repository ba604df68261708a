"""Infrastructure Layer — database plumbing, remote gateway, and logging setup.

Invariants:
    - Infrastructure never imports from services/
    - All database exceptions are mapped to typed gateway errors

Design Decisions:
    - Gateway implements core/repository_protocols.py structurally (no inheritance)
"""
