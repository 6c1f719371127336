"""Epoch counter interface."""

from typing import Protocol


class IEpochCounter(Protocol):
    """Contract for the shared mutation epoch.

    Implementations must make ``increment`` linearizable: every bump is
    globally ordered and visible to every later ``value`` read.
    """

    @property
    def value(self) -> int:
        """Current epoch."""
        ...

    def increment(self) -> int:
        """Advance the epoch by one.

        Returns:
            The new epoch value.
        """
        ...
