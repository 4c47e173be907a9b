"""Core Layer — pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Mapping functions are pure and deterministic (item_id generation is injected)

Design Decisions:
    - Functional core separated from imperative shell: routes and the SQL
      client orchestrate IO around the pure mapping
"""
