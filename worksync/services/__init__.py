"""Services Layer — the Domain Store and its collaborators.

Invariants:
    - Services depend on core/repository_protocols.py, never on a concrete gateway
      (store_factory.py is the single wiring point)
    - Every remote call is awaited before the mirror changes

Design Decisions:
    - Bootstrapper and activity logger are separate classes so each pipeline stage
      is tested on its own
"""
