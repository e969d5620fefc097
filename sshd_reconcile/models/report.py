"""Reconciliation result models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from sshd_reconcile.exceptions import ReconcileError

from .daemon import DaemonTransition


class StepFailure(BaseModel):
    """Structured failure for one declarative entity."""

    step: str
    entity: Optional[str] = None
    kind: str
    message: str

    @classmethod
    def from_error(cls, step: str, error: ReconcileError) -> "StepFailure":
        """Build a failure entry from a reconciliation error."""
        return cls(step=step, entity=error.entity, kind=error.kind, message=error.message)


class RenderedFragments(BaseModel):
    """Rendered sshd_config.d fragment contents."""

    host_keys_fragment: Optional[str] = None  # None = no HostKey directives, file is omitted
    extra_fragment: str = ""


class MaterializeResult(BaseModel):
    """Outcome of one host key materialization pass."""

    generated: list[str] = Field(default_factory=list)
    present: list[str] = Field(default_factory=list)
    commands: list[str] = Field(default_factory=list)
    failures: list[StepFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class ReconcileReport(BaseModel):
    """Outcome of a full reconciliation run."""

    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    dry_run: bool = False
    fragments_written: list[str] = Field(default_factory=list)
    fragments_removed: list[str] = Field(default_factory=list)
    host_keys: Optional[MaterializeResult] = None
    daemon_transition: Optional[DaemonTransition] = None
    failures: list[StepFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no step recorded a failure."""
        return not self.failures
