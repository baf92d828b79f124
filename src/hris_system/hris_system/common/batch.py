from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core.constants import MAX_REPORTED_ERRORS


@dataclass
class BatchResult:
    """Outcome of a sequential bulk operation; earlier successes are never rolled back."""

    added: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)
    items: list[dict[str, Any]] = field(default_factory=list)
    max_errors: int = MAX_REPORTED_ERRORS

    def record_success(self, item: dict[str, Any] | None = None) -> None:
        self.added += 1
        if item is not None:
            self.items.append(item)

    def record_failure(self, message: str) -> None:
        self.failed += 1
        if len(self.errors) < self.max_errors:
            self.errors.append(message)

    @property
    def is_partial_failure(self) -> bool:
        return self.failed > 0 and self.added > 0

    def to_dict(self) -> dict[str, Any]:
        return {"added": self.added, "failed": self.failed, "errors": list(self.errors), "items": list(self.items)}
