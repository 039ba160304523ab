"""
Diagnostics - the single reporting seam for recoverable anomalies

Every bad attribute, double init, missing capability or failing teardown
ends up here: logged through the structured logger and kept as a record so
tests and hosts can inspect what went wrong without exceptions crossing the
public API.
"""

import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional

from models.enums import DiagnosticKind, LogCategory, LogLevel
from models.errors import EffectsError
from utils.logger import get_logger

log = get_logger()

KIND_LEVELS = {
    DiagnosticKind.CONFIGURATION: LogLevel.WARN,
    DiagnosticKind.LIFECYCLE_VIOLATION: LogLevel.WARN,
    DiagnosticKind.DEPENDENCY_UNAVAILABLE: LogLevel.WARN,
    DiagnosticKind.TEARDOWN_FAILURE: LogLevel.ERROR,
}

KIND_CATEGORIES = {
    DiagnosticKind.CONFIGURATION: LogCategory.RESOLVER,
    DiagnosticKind.LIFECYCLE_VIOLATION: LogCategory.REGISTRY,
    DiagnosticKind.DEPENDENCY_UNAVAILABLE: LogCategory.EFFECT,
    DiagnosticKind.TEARDOWN_FAILURE: LogCategory.REGISTRY,
}


@dataclass
class Diagnostic:
    """One reported anomaly"""
    kind: DiagnosticKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


class Diagnostics:
    """Collects and logs diagnostics (bounded history)"""

    def __init__(self, history_limit: int = 200):
        self._records: Deque[Diagnostic] = deque(maxlen=history_limit)
        self._counts: Dict[DiagnosticKind, int] = {kind: 0 for kind in DiagnosticKind}

    def report(self, kind: DiagnosticKind, message: str, **details: Any) -> Diagnostic:
        record = Diagnostic(kind, message, details)
        self._records.append(record)
        self._counts[kind] += 1
        log.log(KIND_CATEGORIES[kind], message, KIND_LEVELS[kind], kind=kind.name, **details)
        return record

    def report_error(self, error: EffectsError, **context: Any) -> Diagnostic:
        """Report a caught runtime error, merging its details with context"""
        details = dict(context)
        details.update(error.details)
        return self.report(error.kind, error.message, **details)

    def count(self, kind: Optional[DiagnosticKind] = None) -> int:
        """Total reports of kind (or all kinds), unaffected by history trimming"""
        if kind is None:
            return sum(self._counts.values())
        return self._counts[kind]

    @property
    def records(self) -> List[Diagnostic]:
        return list(self._records)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [r for r in self._records if r.kind == kind]

    def clear(self) -> None:
        self._records.clear()
        self._counts = {kind: 0 for kind in DiagnosticKind}

    def summary(self) -> Dict[str, int]:
        return {kind.name: count for kind, count in self._counts.items()}
