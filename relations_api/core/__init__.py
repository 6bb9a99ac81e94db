"""Core Layer — pure relationship rules and boundary contracts, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions in link_plan are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: the store is reached only
      through repository_protocols
"""
