"""Data models for EC2 instance records and filter results."""

from __future__ import annotations

import enum
from dataclasses import dataclass

RUNNING = "running"


@dataclass(frozen=True)
class InstanceRecord:
    """A single EC2 instance, reduced to the fields needed to reach it."""

    display_name: str | None
    internal_hostname: str | None
    group_name: str | None
    lifecycle_state: str
    public_address: str | None
    instance_id: str | None = None

    @property
    def is_running(self) -> bool:
        return self.lifecycle_state == RUNNING

    @property
    def label(self) -> str:
        """Name used in diagnostics: the Name tag, else the instance id."""
        return self.display_name or self.instance_id or "<unnamed>"

    def login(self, user: str) -> str:
        """The ``user@address`` argument handed to ssh."""
        return f"{user}@{self.public_address or ''}"


class ExclusionReason(str, enum.Enum):
    NO_STACK = "no_stack"
    NOT_RUNNING = "not_running"


@dataclass(frozen=True)
class Exclusion:
    """A record dropped by the running check, kept for verbose diagnostics."""

    record: InstanceRecord
    reason: ExclusionReason

    @property
    def message(self) -> str:
        if self.reason is ExclusionReason.NO_STACK:
            return f"{self.record.label} is not part of any stack"
        return f"{self.record.label} is not running (state: {self.record.lifecycle_state})"


@dataclass(frozen=True)
class Resolution:
    targets: tuple[InstanceRecord, ...] = ()
    excluded: tuple[Exclusion, ...] = ()
