"""Services Layer — entity store and relationship manager.

Invariants:
    - entity_store is the only module that issues SQL
    - relationship_manager is the only module with cross-entity rules

Design Decisions:
    - Manager depends on the EntityStore protocol, not on SqlEntityStore
"""
