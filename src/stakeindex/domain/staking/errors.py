"""Failure taxonomy for staker resolution."""

from __future__ import annotations


class StakeIndexError(RuntimeError):
    """Base class for errors raised while resolving staking participants."""


class StorageUnavailableError(StakeIndexError):
    """The entity store could not complete a read or write.

    Not recovered locally: the surrounding unit of work rolls back and the block is
    retried by whoever drives ingestion.
    """


class SnapshotUnavailableError(StakeIndexError):
    """Prior chain state could not be read at the requested height."""

    def __init__(self, message: str, *, height: int | None = None) -> None:
        super().__init__(message)
        self.height = height


class InvalidStakerRoleError(StakeIndexError, ValueError):
    """A role outside ``StakerRole`` was passed to the staker factory."""
