from __future__ import annotations

from typing import ContextManager, Protocol


class UnitOfWork(Protocol):
    """Scoped transaction: every write made inside ``transaction()`` commits or none does.

    ``DatabaseConnection`` implements this for MySQL.
    """

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError
