from __future__ import annotations

from typing import Iterable, Optional

from ..audit.service import AuditService
from ..common.identity import Actor
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..database.transaction import UnitOfWork
from .model import ConfigEntry
from .repository import SystemConfigRepository


class SystemConfigService:
    """Flat key -> string settings stored in the database (working days, leave defaults, company info)."""

    def __init__(self, configs: SystemConfigRepository, uow: UnitOfWork, audit: AuditService):
        self._configs = configs
        self._uow = uow
        self._audit = audit

    def get_all(self) -> dict[str, str]:
        return {entry.key: entry.value for entry in self._configs.list_all()}

    def get(self, key: str) -> ConfigEntry:
        entry = self._configs.get(key)
        if not entry:
            raise NotFoundError("Configuration not found")
        return entry

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Stored value, or ``default`` when the key is missing or blank."""
        entry = self._configs.get(key)
        if not entry or not entry.value.strip():
            return default
        return entry.value

    def get_int(self, key: str, default: int) -> int:
        entry = self._configs.get(key)
        if not entry:
            return int(default)
        try:
            return int(entry.value.strip())
        except ValueError:
            raise ValidationError(f"Configuration {key} must be an integer, got {entry.value!r}")

    def upsert(self, *, actor: Actor, key: str, value: str, description: Optional[str] = None) -> ConfigEntry:
        actor.require_admin()
        entry = ConfigEntry(key=require_non_empty(key, "Key"), value=str(value), description=description)
        with self._uow.transaction():
            self._configs.upsert(entry)
            self._audit.record(actor=actor, action="UPDATE", entity="SYSTEM_CONFIG", entity_id=entry.key, changes={"key": entry.key, "value": entry.value})
        return self.get(entry.key)

    def upsert_many(self, *, actor: Actor, entries: Iterable[ConfigEntry]) -> list[ConfigEntry]:
        actor.require_admin()
        entries = [
            ConfigEntry(key=require_non_empty(e.key, "Key"), value=str(e.value), description=e.description)
            for e in entries
        ]
        with self._uow.transaction():
            for entry in entries:
                self._configs.upsert(entry)
            self._audit.record(actor=actor, action="UPDATE", entity="SYSTEM_CONFIG", entity_id="BATCH", changes={"entries": entries})
        return [self.get(e.key) for e in entries]
