"""Terminal actions: what the CLI does with a resolved set of targets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from .discovery.models import InstanceRecord


@dataclass(frozen=True)
class ShowListing:
    lines: tuple[str, ...]


@dataclass(frozen=True)
class ConnectSSH:
    login: str
    target: InstanceRecord


@dataclass(frozen=True)
class AmbiguousTarget:
    lines: tuple[str, ...]


Action = Union[ShowListing, ConnectSSH, AmbiguousTarget]


def connection_line(record: InstanceRecord, user: str) -> str:
    """e.g. 'ssh deploy@10.0.0.1 => prod-app1'."""
    return f"ssh {record.login(user)} => {record.display_name or ''}"


def multi_host_line(records: Sequence[InstanceRecord], user: str) -> str:
    """All logins on one line, ready for csshX and similar tools."""
    return " ".join(record.login(user) for record in records)


def format_listing(records: Sequence[InstanceRecord], user: str) -> tuple[str, ...]:
    lines = [connection_line(record, user) for record in records]
    lines.append(multi_host_line(records, user))
    return tuple(lines)


def plan(targets: Sequence[InstanceRecord], user: str, show_only: bool) -> Action:
    """Pick the terminal action for ``targets``.

    List mode always shows the listing. Connect mode connects to a single
    target, refuses more than one, and falls back to the (empty) listing when
    nothing matched.
    """
    targets = tuple(targets)
    if show_only or not targets:
        return ShowListing(format_listing(targets, user))
    if len(targets) > 1:
        return AmbiguousTarget(format_listing(targets, user))
    return ConnectSSH(targets[0].login(user), targets[0])
