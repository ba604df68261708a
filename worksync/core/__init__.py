"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (ids and clocks are passed in or
      issued by the remote store)

Design Decisions:
    - Functional core separated from imperative shell: entities, mapping, embedded
      collection edits and activity labels are tested without a database
"""
