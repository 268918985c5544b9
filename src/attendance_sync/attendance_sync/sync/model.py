from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class SyncFailure:
    id: str
    error: str


@dataclass(frozen=True)
class SyncReport:
    """Outcome of one drain pass."""

    succeeded: List[str] = field(default_factory=list)
    failed: List[SyncFailure] = field(default_factory=list)
    skipped: bool = False
    reason: Optional[str] = None

    @classmethod
    def skip(cls, reason: str) -> "SyncReport":
        return cls(skipped=True, reason=reason)

    @property
    def failed_ids(self) -> List[str]:
        return [f.id for f in self.failed]
