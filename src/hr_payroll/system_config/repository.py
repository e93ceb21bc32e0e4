from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ConfigEntry


class SystemConfigRepository(Protocol):
    def get(self, key: str) -> Optional[ConfigEntry]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ConfigEntry]:
        raise NotImplementedError

    def upsert(self, entry: ConfigEntry) -> None:
        raise NotImplementedError
