"""Category and account lookup helpers.

Categories form a two-level tree: top-level categories (``parent_id is
None``) own zero or more subcategories. Nothing deeper is supported, so
walking to the top level is a single hop.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import Account, Category, LedgerEntry


class CategoryIndex:
    """An id -> :class:`Category` map with tree helpers.

    Later duplicates of an id replace earlier ones (last write wins), matching
    how the backend's list endpoint would be folded into a map.
    """

    __slots__ = ("_by_id", "_order")

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._by_id: dict[str, Category] = {}
        self._order: list[str] = []
        for cat in categories:
            if cat.id not in self._by_id:
                self._order.append(cat.id)
            self._by_id[cat.id] = cat

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id

    def __iter__(self):
        return (self._by_id[cid] for cid in self._order)

    def get(self, category_id: str | None) -> Category | None:
        if category_id is None:
            return None
        return self._by_id.get(category_id)

    def resolve(self, entry: LedgerEntry) -> Category | None:
        """Return the entry's category: the joined record first, then the index."""

        if entry.category is not None:
            return entry.category
        return self.get(entry.category_id)

    def top_level(self, category: Category) -> Category:
        """Return ``category``'s parent when it is a subcategory, else itself.

        A subcategory whose parent is unknown stands in for its own parent.
        """

        if category.parent_id is None:
            return category
        return self._by_id.get(category.parent_id, category)

    def parents(self) -> list[Category]:
        return [c for c in self if c.parent_id is None]

    def children(self, parent_id: str) -> list[Category]:
        return [c for c in self if c.parent_id == parent_id]


def index_accounts(accounts: Iterable[Account]) -> dict[str, Account]:
    return {acc.id: acc for acc in accounts}


def find_account(accounts: Iterable[Account], account_id: str) -> Account | None:
    for acc in accounts:
        if acc.id == account_id:
            return acc
    return None


__all__ = ["CategoryIndex", "find_account", "index_accounts"]
