from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class FileSpec:
    """Metadata snapshot of one stored object."""

    path: str
    size: int
    created: datetime
    modified: datetime
