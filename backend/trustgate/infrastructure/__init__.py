"""Infrastructure Layer — database access, the SQL list client and logging setup.

Invariants:
    - Infrastructure implements core protocols; core never imports it
    - SQLAlchemy exceptions are mapped to DatabaseError at the session boundary
"""
