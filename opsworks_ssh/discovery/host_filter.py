"""Regex filtering of instance records by stack and hostname, plus the running check."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from ..exceptions import ConfigError
from .models import Exclusion, ExclusionReason, InstanceRecord, Resolution

logger = logging.getLogger(__name__)


def _compile(pattern: str | None, flags: int, what: str) -> re.Pattern | None:
    if not pattern:
        return None
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise ConfigError(f"Invalid {what} pattern {pattern!r}: {exc}") from exc


def _search(pattern: re.Pattern, value: str | None) -> bool:
    return value is not None and pattern.search(value) is not None


def _sort_key(record: InstanceRecord) -> str:
    # Unnamed records sort as "", ahead of every named one
    return record.display_name or ""


class HostFilter:
    """Selects running instances whose stack and hostname match the given patterns.

    The hostname pattern must match BOTH the ``opsworks:instance`` tag and the
    ``Name`` tag; a record missing either one never matches.
    """

    def __init__(
        self,
        host_pattern: str | None = None,
        group_pattern: str | None = None,
        case_sensitive: bool = False,
    ):
        flags = 0 if case_sensitive else re.IGNORECASE
        self._host = _compile(host_pattern, flags, "hostname")
        self._group = _compile(group_pattern, flags, "stack")

    def apply(self, records: Iterable[InstanceRecord]) -> Resolution:
        targets: list[InstanceRecord] = []
        excluded: list[Exclusion] = []

        for record in records:
            if not self._matches(record):
                continue
            if not record.is_running:
                reason = ExclusionReason.NOT_RUNNING if record.group_name else ExclusionReason.NO_STACK
                exclusion = Exclusion(record, reason)
                logger.info("%s", exclusion.message)
                excluded.append(exclusion)
                continue
            targets.append(record)

        targets.sort(key=_sort_key)
        logger.debug("%d instances matched", len(targets))
        return Resolution(targets=tuple(targets), excluded=tuple(excluded))

    def _matches(self, record: InstanceRecord) -> bool:
        if self._group is not None and not _search(self._group, record.group_name):
            logger.debug("%s rejected by stack pattern", record.label)
            return False

        if self._host is not None and not (
            _search(self._host, record.internal_hostname) and _search(self._host, record.display_name)
        ):
            logger.debug("%s rejected by hostname pattern", record.label)
            return False

        return True


def resolve(
    records: Iterable[InstanceRecord],
    host_pattern: str | None = None,
    group_pattern: str | None = None,
    case_sensitive: bool = False,
) -> Resolution:
    """Filter, running-check and sort ``records``."""
    return HostFilter(host_pattern, group_pattern, case_sensitive).apply(records)
