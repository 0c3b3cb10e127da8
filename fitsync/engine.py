# -*- coding: utf-8 -*-
"""Engine wiring. Builds the stores, cache, mutator and coordinator once at startup."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request

from .config import Settings
from .events import EventBus
from .foodlog.cache import ComputationCache
from .foodlog.mutator import FoodLogMutator, local_today
from .foodlog.storage import PersistentLogStore
from .profile.remote import HttpProfileStore, InMemoryProfileStore, RemoteProfileStore
from .profile.storage import RecommendationStore
from .profile.sync import SyncCoordinator, SyncResult

logger = logging.getLogger(__name__)


@dataclass
class NutritionEngine:
    user_id: str
    bus: EventBus
    log_store: PersistentLogStore
    cache: ComputationCache
    recommendations: RecommendationStore
    remote: RemoteProfileStore
    mutator: FoodLogMutator
    coordinator: SyncCoordinator

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        remote: Optional[RemoteProfileStore] = None,
        today: Callable[[], str] = local_today,
        clock: Callable[[], float] = time.monotonic,
    ) -> "NutritionEngine":
        user_root = settings.user_root()
        bus = EventBus()
        log_store = PersistentLogStore(user_root / "foodlog")
        cache = ComputationCache(log_store)
        recommendations = RecommendationStore(user_root / "recommendation.json")
        if remote is None:
            remote = _remote_from_settings(settings)
        mutator = FoodLogMutator(log_store, cache, recommendations, bus, today=today)
        coordinator = SyncCoordinator(
            user_id=settings.user_id,
            remote=remote,
            recommendations=recommendations,
            mutator=mutator,
            bus=bus,
            debounce_ms=settings.sync_debounce_ms,
            clock=clock,
        )
        return cls(
            user_id=settings.user_id,
            bus=bus,
            log_store=log_store,
            cache=cache,
            recommendations=recommendations,
            remote=remote,
            mutator=mutator,
            coordinator=coordinator,
        )

    async def initialize(self) -> Optional[SyncResult]:
        result = await self.coordinator.pull_remote()
        logger.info("Nutrition engine ready for user %s", self.user_id)
        return result


def _remote_from_settings(settings: Settings) -> RemoteProfileStore:
    if settings.profile_store_url:
        return HttpProfileStore(
            settings.profile_store_url,
            token=settings.profile_store_token,
            collection=settings.profile_collection,
            timeout=settings.profile_timeout,
        )
    logger.info("FITSYNC_PROFILE_STORE_URL not set; using in-memory profile store")
    return InMemoryProfileStore()


def get_engine(request: Request) -> NutritionEngine:
    return request.app.state.engine
