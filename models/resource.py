"""
Resource model for the Round-Robin & Deadlock Simulator.

Represents a single-instance resource and a pending request for one.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Resource:
    """
    Represents a single-instance resource in the resource-allocation graph.

    Attributes:
        rid: Resource identifier
        holder: Process currently holding the resource, or None when free

    Invariant:
        At most one holder at any time
    """
    rid: str
    holder: Optional[str] = None

    def __post_init__(self):
        if self.rid is None or not str(self.rid).strip():
            raise ValueError("Each resource needs an ID.")
        self.rid = str(self.rid).strip()

    def is_free(self) -> bool:
        return self.holder is None

    def allocate(self, pid: str) -> bool:
        """
        Hand the resource to a process if it is free.

        Implements Mutual Exclusion: a held resource cannot be allocated again.

        Args:
            pid: Process receiving the resource

        Returns:
            True if allocation successful, False if already held
        """
        if self.holder is not None:
            return False
        self.holder = pid
        return True

    def release(self) -> Optional[str]:
        """
        Free the resource.

        Returns:
            Previous holder, or None if the resource was already free
        """
        previous = self.holder
        self.holder = None
        return previous


@dataclass(frozen=True)
class Request:
    """A pending request edge: process -> resource."""
    pid: str
    rid: str

    def as_dict(self):
        return {'process': self.pid, 'resource': self.rid}
