from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ConfigEntry:
    key: str
    value: str
    description: Optional[str] = None
