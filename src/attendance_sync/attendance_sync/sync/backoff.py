from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import DEFAULT_BACKOFF_BASE_SECONDS, DEFAULT_BACKOFF_FACTOR, DEFAULT_BACKOFF_MAX_SECONDS
from ..core.exceptions import ValidationError


@dataclass
class ExponentialBackoff:
    """Delay between automatic drain passes after consecutive failed passes.

    delay(n) = min(base * factor ** (n - 1), max) for n >= 1, 0 for n == 0.
    """

    base_seconds: float = DEFAULT_BACKOFF_BASE_SECONDS
    factor: float = DEFAULT_BACKOFF_FACTOR
    max_seconds: float = DEFAULT_BACKOFF_MAX_SECONDS
    failures: int = 0
    next_attempt_at: Optional[datetime] = None

    def __post_init__(self):
        if self.base_seconds < 0 or self.max_seconds < 0:
            raise ValidationError("backoff delays must be >= 0")
        if self.factor < 1:
            raise ValidationError("backoff factor must be >= 1")

    def delay_seconds(self, failures: Optional[int] = None) -> float:
        n = self.failures if failures is None else failures
        if n <= 0:
            return 0.0
        # Cap the exponent too so huge streaks cannot overflow.
        exponent = min(n - 1, 64)
        return float(min(self.base_seconds * self.factor ** exponent, self.max_seconds))

    def record_failure(self, now: datetime) -> datetime:
        self.failures += 1
        self.next_attempt_at = now + timedelta(seconds=self.delay_seconds())
        return self.next_attempt_at

    def reset(self) -> None:
        self.failures = 0
        self.next_attempt_at = None

    def is_due(self, now: datetime) -> bool:
        return self.next_attempt_at is None or now >= self.next_attempt_at
