"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain entity logic: each maps to exactly one manager call

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
