# -*- coding: utf-8 -*-
"""Profile sync: reconciles the remote profile with the local recommendation."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..errors import ConcurrencyDrop, FitSyncError, ProfileSyncError, RemoteUnavailable, ValidationError
from ..events import EventBus, EventKind
from ..foodlog.mutator import FoodLogMutator, utc_now_iso
from .models import DEFAULT_PROFILE, NutritionRecommendation, ProfileData, SyncDirection
from .recommendation import build_recommendation, profile_from_remote, remote_fields
from .remote import RemoteProfileStore
from .storage import RecommendationStore

logger = logging.getLogger(__name__)

SyncResult = Union[NutritionRecommendation, ConcurrencyDrop]


class SyncState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class SyncCoordinator:
    """Single-flight, debounced profile synchronization.

    ``sync_profile`` moves ``IDLE -> IN_FLIGHT -> IDLE``. A call made while
    another is in flight, or within ``debounce_ms`` of the last completed
    call, is dropped and gets a ``ConcurrencyDrop`` back instead of being
    queued. The coordinator is the only writer of ``recommended`` and the
    profile fields; ``current`` is always carried over from the food log.
    """

    def __init__(
        self,
        *,
        user_id: str,
        remote: RemoteProfileStore,
        recommendations: RecommendationStore,
        mutator: FoodLogMutator,
        bus: EventBus,
        debounce_ms: int = 1000,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], str] = utc_now_iso,
    ) -> None:
        self.user_id = user_id
        self._remote = remote
        self._recommendations = recommendations
        self._mutator = mutator
        self._bus = bus
        self._debounce_ms = debounce_ms
        self._clock = clock
        self._now = now
        self._in_flight = False
        self._last_completed: Optional[float] = None

    @property
    def state(self) -> SyncState:
        return SyncState.IN_FLIGHT if self._in_flight else SyncState.IDLE

    def current_recommendation(self) -> NutritionRecommendation:
        with self._mutator.lock:
            stored = self._mutator.reconcile_current()
            if stored is not None:
                return stored
            recommendation = build_recommendation(
                DEFAULT_PROFILE,
                current=self._mutator.get_current_protein_intake(),
                day=self._mutator.today(),
            )
            return self._recommendations.save(recommendation)

    async def sync_profile(
        self,
        profile_data: Union[ProfileData, Mapping[str, Any]],
        direction: Union[SyncDirection, str],
    ) -> SyncResult:
        profile, direction = self._validate(profile_data, direction)

        if self._in_flight:
            logger.info("Sync already in progress, skipping")
            return ConcurrencyDrop.IN_FLIGHT
        if self._debounced():
            logger.info("Sync debounced - too soon since last sync")
            return ConcurrencyDrop.DEBOUNCED

        self._in_flight = True
        try:
            if direction is SyncDirection.TO_REMOTE:
                partial = remote_fields(profile)
                partial["lastUpdated"] = self._now()
                if not await self._remote.update(self.user_id, partial):
                    raise ProfileSyncError(f"Remote store has no profile for {self.user_id}")

            recommendation = self._apply(profile)
            self._bus.dispatch(
                EventKind.SYNC_COMPLETED,
                {
                    "profileData": profile.model_dump(mode="json"),
                    "recommendation": recommendation.model_dump(mode="json"),
                    "direction": direction.value,
                },
            )
            logger.info(
                "Profile sync %s completed: recommended=%s current=%s",
                direction.value,
                recommendation.recommended,
                recommendation.current,
            )
            return recommendation
        except FitSyncError as exc:
            logger.warning("Profile sync %s failed: %s", direction.value, exc)
            raise
        finally:
            self._in_flight = False
            self._last_completed = self._clock()

    async def pull_remote(self) -> Optional[SyncResult]:
        """Fetch the remote profile and apply it locally; None when only local state is usable."""
        try:
            remote = await self._remote.fetch(self.user_id)
        except RemoteUnavailable as exc:
            logger.warning("Remote profile store unavailable, continuing with local state: %s", exc)
            return None
        if remote is None:
            logger.info("No remote profile for %s, continuing with local state", self.user_id)
            return None

        try:
            profile = profile_from_remote(remote)
        except PydanticValidationError as exc:
            logger.warning("Remote profile is out of range, continuing with local state: %s", exc)
            return None
        self._bus.dispatch(
            EventKind.PROFILE_UPDATED,
            {"profile": profile.model_dump(mode="json"), "source": "remote"},
        )
        return await self.sync_profile(profile, SyncDirection.TO_LOCAL)

    def _debounced(self) -> bool:
        if self._last_completed is None:
            return False
        return (self._clock() - self._last_completed) * 1000.0 < self._debounce_ms

    def _apply(self, profile: ProfileData) -> NutritionRecommendation:
        # current is read and saved under the food log lock.
        with self._mutator.lock:
            existing = self._mutator.reconcile_current()
            if existing is not None:
                current = existing.current
            else:
                current = self._mutator.get_current_protein_intake()
            recommendation = build_recommendation(profile, current=current, day=self._mutator.today())
            return self._recommendations.save(recommendation)

    @staticmethod
    def _validate(
        profile_data: Union[ProfileData, Mapping[str, Any]],
        direction: Union[SyncDirection, str],
    ) -> tuple[ProfileData, SyncDirection]:
        try:
            direction = SyncDirection(direction)
        except ValueError as exc:
            raise ValidationError(f"Invalid sync direction: {direction!r}") from exc
        if isinstance(profile_data, ProfileData):
            return profile_data, direction
        try:
            return ProfileData.model_validate(profile_data), direction
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid profile: {exc}") from exc
