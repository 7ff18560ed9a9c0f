"""db: shared database library (SQLAlchemy) for the hosted Vixus backend.

Public exports
--------------
- ``Base`` and ``metadata`` for schema creation in tests and tooling
- ORM models in ``db.models.finance`` (re-exported for convenience)
- Engine/session helpers in ``db.client``
"""

from __future__ import annotations

from .models.finance import Base, PoupejaAccount, PoupejaCategory, PoupejaLancamento

metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "PoupejaAccount",
    "PoupejaCategory",
    "PoupejaLancamento",
]
