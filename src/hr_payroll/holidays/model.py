from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Holiday:
    id: int
    name: str
    holiday_date: date
    description: Optional[str] = None
