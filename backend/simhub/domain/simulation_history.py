"""
SimHub Backend — SimulationHistoryEntry Aggregate
=================================================

What:  One simulation run record and its status state machine.
Why:   Keeps the lifecycle rules (which status may follow which, when a report
       path is allowed) in one place that both adapters and all use cases share.
How:   A dataclass with invariant checks in __post_init__ and mutation methods
       that refresh updated_at.

State Machine:
    PENDING   → RUNNING, FAILED
    RUNNING   → COMPLETED, FAILED
    COMPLETED → (terminal)
    FAILED    → (terminal)

    Repositories never consult this table; update() persists whatever it is
    given. The use case (SimulationHistoryService.update_status) enforces it.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from simhub.domain.common import Invalid, ParseResult, Valid, ensure_utc, utcnow
from simhub.exceptions import DomainError


class SimulationStatus(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


TERMINAL_STATUSES: FrozenSet[SimulationStatus] = frozenset(
    {SimulationStatus.COMPLETED, SimulationStatus.FAILED}
)

_TRANSITIONS: Dict[SimulationStatus, FrozenSet[SimulationStatus]] = {
    SimulationStatus.PENDING: frozenset({SimulationStatus.RUNNING, SimulationStatus.FAILED}),
    SimulationStatus.RUNNING: frozenset({SimulationStatus.COMPLETED, SimulationStatus.FAILED}),
    SimulationStatus.COMPLETED: frozenset(),
    SimulationStatus.FAILED: frozenset(),
}


def parse_simulation_status(value: Any) -> ParseResult[SimulationStatus]:
    """
    Parse a raw value into a SimulationStatus.

    Returns Valid(status) for an exact member name, Invalid(reason) otherwise.
    Matching is case-sensitive: stored and filtered statuses are upper case.
    """
    if isinstance(value, SimulationStatus):
        return Valid(value)
    try:
        return Valid(SimulationStatus(value))
    except ValueError:
        allowed = ", ".join(s.value for s in SimulationStatus)
        return Invalid(f"Unknown simulation status {value!r}. Must be one of: {allowed}")


@dataclass
class SimulationHistoryEntry:
    """
    A single simulation execution record.

    Invariants (checked on construction):
        - id, project_path, project_name, ttk_version are non-blank
        - duration_ms, battle_count, trecho_count are None or >= 0
        - has_report is True  ⇔ report_file_path is a non-blank string
        - every instant is timezone-aware UTC

    The id cannot be reassigned once set; everything else is mutable through
    the methods below so updated_at stays truthful.
    """

    id: str
    project_path: str
    project_name: str
    ttk_version: str
    config_json: str
    status: SimulationStatus = SimulationStatus.PENDING
    summary_json: str = "{}"
    has_report: bool = False
    report_file_path: Optional[str] = None
    duration_ms: Optional[int] = None
    battle_count: Optional[int] = None
    trecho_count: Optional[int] = None
    timestamp: datetime = field(default_factory=utcnow)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "id" and "id" in self.__dict__:
            raise AttributeError("SimulationHistoryEntry.id is immutable once assigned")
        super().__setattr__(name, value)

    def __post_init__(self) -> None:
        parsed = parse_simulation_status(self.status)
        if isinstance(parsed, Invalid):
            raise DomainError(parsed.reason)
        self.status = parsed.value

        self.timestamp = ensure_utc(self.timestamp)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at) if self.updated_at else self.created_at
        self._validate()

    def _validate(self) -> None:
        if not self.id or not self.id.strip():
            raise DomainError("Simulation id is required")
        if not self.project_path or not self.project_path.strip():
            raise DomainError("Project path is required")
        if not self.project_name or not self.project_name.strip():
            raise DomainError("Project name is required")
        if not self.ttk_version or not self.ttk_version.strip():
            raise DomainError("TTK version is required")

        for name in ("duration_ms", "battle_count", "trecho_count"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise DomainError(f"{name} cannot be negative", context={name: value})

        if self.has_report and not (self.report_file_path and self.report_file_path.strip()):
            raise DomainError("Report file path is required when has_report is true")
        if not self.has_report and self.report_file_path is not None:
            raise DomainError("Report file path must be absent when has_report is false")

    # ── Factory ───────────────────────────────────────────────────────────
    @classmethod
    def create(
        cls,
        *,
        project_path: str,
        project_name: str,
        ttk_version: str,
        config_json: str,
        status: Optional[SimulationStatus] = None,
        summary_json: Optional[str] = None,
        has_report: bool = False,
        report_file_path: Optional[str] = None,
        duration_ms: Optional[int] = None,
        battle_count: Optional[int] = None,
        trecho_count: Optional[int] = None,
        timestamp: Optional[datetime] = None,
        id: Optional[str] = None,
    ) -> "SimulationHistoryEntry":
        """
        Build a new entry, assigning identity and audit timestamps.

        Defaults: status PENDING, summary "{}", timestamp = now.
        """
        now = utcnow()
        return cls(
            id=id or str(uuid.uuid4()),
            project_path=project_path,
            project_name=project_name,
            ttk_version=ttk_version,
            config_json=config_json,
            status=status or SimulationStatus.PENDING,
            summary_json=summary_json if summary_json is not None else "{}",
            has_report=has_report,
            report_file_path=report_file_path,
            duration_ms=duration_ms,
            battle_count=battle_count,
            trecho_count=trecho_count,
            timestamp=timestamp or now,
            created_at=now,
            updated_at=now,
        )

    # ── State Machine ─────────────────────────────────────────────────────
    def can_transition_to(self, new_status: SimulationStatus) -> bool:
        return new_status in _TRANSITIONS[self.status]

    def _transition_to(self, new_status: SimulationStatus) -> None:
        if not self.can_transition_to(new_status):
            raise DomainError(
                f"Cannot transition from {self.status.value} to {new_status.value}",
                context={"id": self.id, "from": self.status.value, "to": new_status.value},
            )
        self.status = new_status
        self._touch()

    def mark_running(self) -> None:
        self._transition_to(SimulationStatus.RUNNING)

    def mark_completed(self, summary_json: str) -> None:
        self._transition_to(SimulationStatus.COMPLETED)
        self.summary_json = summary_json

    def mark_failed(self, error_json: Optional[str] = None) -> None:
        self._transition_to(SimulationStatus.FAILED)
        if error_json:
            self.summary_json = error_json

    def update_summary(self, summary_json: str) -> None:
        self.summary_json = summary_json
        self._touch()

    def attach_report(self, report_file_path: str) -> None:
        """Record the generated report's location and flag the entry as having one."""
        if not report_file_path or not report_file_path.strip():
            raise DomainError("Report file path cannot be empty")
        self.report_file_path = report_file_path
        self.has_report = True
        self._touch()

    def _touch(self) -> None:
        self.updated_at = utcnow()

    # ── Queries ───────────────────────────────────────────────────────────
    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_pending(self) -> bool:
        return self.status is SimulationStatus.PENDING

    @property
    def is_running(self) -> bool:
        return self.status is SimulationStatus.RUNNING

    def __repr__(self) -> str:
        return (
            f"<SimulationHistoryEntry(id={self.id}, status='{self.status.value}', "
            f"timestamp='{self.timestamp.isoformat()}')>"
        )
