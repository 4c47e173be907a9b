"""ORM Models — SQLAlchemy declarative models for the exception list store.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - All models imported here so Base.metadata is complete for create_all and alembic
"""

from trustgate.models.exception_list import ExceptionList  # noqa: F401
from trustgate.models.exception_list import ExceptionListItem  # noqa: F401
