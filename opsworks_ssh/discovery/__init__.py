"""Inventory discovery package: the client Protocol every inventory source satisfies."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .models import InstanceRecord


@runtime_checkable
class InventoryClient(Protocol):
    """Protocol that every inventory client must satisfy."""

    def fetch(self) -> list[InstanceRecord]:
        """Return every instance visible to the configured account and region."""
        ...
