from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class SaveState(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    FAILED = "failed"


class MutationKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"


@dataclass
class RowOutcome:
    """Result of one mutation call inside a batch save."""

    index: int
    operation: MutationKind
    draft: Dict[str, Any]
    record: Optional[Any] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SaveOutcome:
    ok: bool
    message: str
    # per-row results in draft order
    rows: List[RowOutcome] = field(default_factory=list)

    @property
    def created(self) -> int:
        return sum(1 for r in self.rows if r.ok and r.operation is MutationKind.CREATE)

    @property
    def updated(self) -> int:
        return sum(1 for r in self.rows if r.ok and r.operation is MutationKind.UPDATE)

    @property
    def failed(self) -> List[RowOutcome]:
        return [r for r in self.rows if not r.ok]
