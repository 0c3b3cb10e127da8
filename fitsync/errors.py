# -*- coding: utf-8 -*-
"""Error taxonomy shared by the stores, the mutator and the sync coordinator."""

from __future__ import annotations

from enum import Enum


class FitSyncError(Exception):
    """Base class for engine errors."""


class RemoteUnavailable(FitSyncError):
    """The remote profile store could not be reached or refused our credentials.

    Callers are expected to keep working on local state when they see this.
    """


class ValidationError(FitSyncError, ValueError):
    """A food entry or day key was rejected before touching any store."""


class ProfileSyncError(FitSyncError):
    """The remote store answered but did not accept a profile push."""


class StorageCorruption(FitSyncError):
    """A persisted payload could not be decoded."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Corrupted payload for {key}: {reason}")
        self.key = key
        self.reason = reason


class ConcurrencyDrop(str, Enum):
    """Returned (never raised) when a sync call is turned away."""

    IN_FLIGHT = "in_flight"
    DEBOUNCED = "debounced"
