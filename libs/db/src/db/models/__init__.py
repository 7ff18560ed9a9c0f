"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the ledger, category and account tables read by ``vixus``.
"""

from .finance import Base, PoupejaAccount, PoupejaCategory, PoupejaLancamento

__all__ = [
    "Base",
    "PoupejaAccount",
    "PoupejaCategory",
    "PoupejaLancamento",
]
