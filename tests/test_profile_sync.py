# -*- coding: utf-8 -*-

from __future__ import annotations

import asyncio
import shutil
import tempfile
import unittest
from pathlib import Path
from typing import Any, Dict, List, Optional

from fitsync.errors import ConcurrencyDrop, ProfileSyncError, RemoteUnavailable, ValidationError
from fitsync.events import Event, EventBus, EventKind
from fitsync.foodlog.cache import ComputationCache
from fitsync.foodlog.mutator import FoodLogMutator
from fitsync.foodlog.storage import PersistentLogStore
from fitsync.profile.models import NutritionRecommendation, ProfileData, RemoteProfile, SyncDirection
from fitsync.profile.remote import RemoteProfileStore
from fitsync.profile.storage import RecommendationStore
from fitsync.profile.sync import SyncCoordinator, SyncState

DAY = "2024-05-01"


class FakeRemote(RemoteProfileStore):
    def __init__(self) -> None:
        self.document: Optional[Dict[str, Any]] = None
        self.updates: List[Dict[str, Any]] = []
        self.fetch_error: Optional[Exception] = None
        self.update_error: Optional[Exception] = None
        self.update_result = True
        self.gate: Optional[asyncio.Event] = None

    async def fetch(self, user_id: str) -> Optional[RemoteProfile]:
        if self.fetch_error is not None:
            raise self.fetch_error
        if self.document is None:
            return None
        return RemoteProfile.from_document(self.document)

    async def update(self, user_id: str, partial: Dict[str, Any]) -> bool:
        self.updates.append(partial)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if self.update_error is not None:
            raise self.update_error
        return self.update_result


def _profile(weight: float = 70, goal: str = "muscle_gain") -> ProfileData:
    return ProfileData(weight=weight, height=180, age=28, gender="female", activity_level="active", goal=goal)


class TestSyncCoordinator(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="fitsync-test-"))
        self.now = 1000.0
        self.bus = EventBus()
        log_store = PersistentLogStore(self._tmp / "foodlog")
        self.cache = ComputationCache(log_store)
        self.recommendations = RecommendationStore(self._tmp / "recommendation.json")
        self.mutator = FoodLogMutator(log_store, self.cache, self.recommendations, self.bus, today=lambda: DAY)
        self.remote = FakeRemote()
        self.coordinator = SyncCoordinator(
            user_id="user-1",
            remote=self.remote,
            recommendations=self.recommendations,
            mutator=self.mutator,
            bus=self.bus,
            debounce_ms=1000,
            clock=lambda: self.now,
            now=lambda: "2024-05-01T12:00:00Z",
        )
        self.events: List[Event] = []
        self.bus.subscribe(EventKind.SYNC_COMPLETED, self.events.append)
        self.bus.subscribe(EventKind.PROFILE_UPDATED, self.events.append)

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def _advance(self, seconds: float = 1.5) -> None:
        self.now += seconds

    async def test_to_remote_pushes_profile_and_recomputes(self) -> None:
        result = await self.coordinator.sync_profile(_profile(), SyncDirection.TO_REMOTE)

        self.assertIsInstance(result, NutritionRecommendation)
        self.assertEqual(result.recommended, 126)
        self.assertEqual(len(self.remote.updates), 1)
        pushed = self.remote.updates[0]
        self.assertEqual(pushed["fitnessGoal"], "Muscle Gain")
        self.assertEqual(pushed["activityLevel"], "active")
        self.assertEqual(pushed["lastUpdated"], "2024-05-01T12:00:00Z")
        self.assertEqual(self.recommendations.get(), result)

    async def test_to_local_does_not_call_remote(self) -> None:
        result = await self.coordinator.sync_profile({"weight": 80, "height": 170, "age": 35}, "toLocal")

        self.assertEqual(result.recommended, 96)
        self.assertEqual(self.remote.updates, [])

    async def test_concurrent_calls_are_single_flight(self) -> None:
        self.remote.gate = asyncio.Event()

        first = asyncio.create_task(self.coordinator.sync_profile(_profile(), SyncDirection.TO_REMOTE))
        await asyncio.sleep(0)
        self.assertEqual(self.coordinator.state, SyncState.IN_FLIGHT)

        second = await self.coordinator.sync_profile(_profile(90), SyncDirection.TO_REMOTE)
        self.assertIs(second, ConcurrencyDrop.IN_FLIGHT)

        self.remote.gate.set()
        result = await first
        self.assertIsInstance(result, NutritionRecommendation)
        self.assertEqual(len(self.remote.updates), 1)
        self.assertEqual(self.coordinator.state, SyncState.IDLE)

    async def test_gathered_calls_update_remote_once(self) -> None:
        results = await asyncio.gather(
            self.coordinator.sync_profile(_profile(), SyncDirection.TO_REMOTE),
            self.coordinator.sync_profile(_profile(), SyncDirection.TO_REMOTE),
        )

        self.assertEqual(len(self.remote.updates), 1)
        self.assertEqual(sum(isinstance(r, ConcurrencyDrop) for r in results), 1)

    async def test_call_inside_debounce_window_is_dropped(self) -> None:
        first = await self.coordinator.sync_profile(_profile(), SyncDirection.TO_REMOTE)
        self.assertIsInstance(first, NutritionRecommendation)

        self._advance(0.5)
        second = await self.coordinator.sync_profile(_profile(90), SyncDirection.TO_REMOTE)
        self.assertIs(second, ConcurrencyDrop.DEBOUNCED)
        self.assertEqual(len(self.remote.updates), 1)

        self._advance(0.6)
        third = await self.coordinator.sync_profile(_profile(90), SyncDirection.TO_REMOTE)
        self.assertIsInstance(third, NutritionRecommendation)
        self.assertEqual(len(self.remote.updates), 2)

    async def test_to_local_keeps_current(self) -> None:
        self.mutator.add(DAY, {"name": "Chicken Breast", "protein_g": 31})
        await self.coordinator.sync_profile(_profile(70), SyncDirection.TO_LOCAL)
        self.mutator.add(DAY, {"name": "Cottage Cheese", "protein_g": 17})
        before = self.recommendations.get()
        self.assertEqual(before.current, 48)

        self._advance()
        after = await self.coordinator.sync_profile(_profile(90, "maintenance"), SyncDirection.TO_LOCAL)

        self.assertEqual(after.current, 48)
        self.assertEqual(after.recommended, 108)
        self.assertNotEqual(after.recommended, before.recommended)

    async def test_first_sync_takes_current_from_log(self) -> None:
        self.mutator.add(DAY, {"name": "Tuna", "protein_g": 26})
        result = await self.coordinator.sync_profile(_profile(), SyncDirection.TO_LOCAL)
        self.assertEqual(result.current, 26)

    async def test_failure_propagates_and_clears_in_flight(self) -> None:
        self.remote.update_error = RemoteUnavailable("network down")

        with self.assertRaises(RemoteUnavailable):
            await self.coordinator.sync_profile(_profile(), SyncDirection.TO_REMOTE)

        self.assertEqual(self.coordinator.state, SyncState.IDLE)
        self.assertIsNone(self.recommendations.get())
        self.assertEqual(self.events, [])

        self.remote.update_error = None
        self._advance()
        result = await self.coordinator.sync_profile(_profile(), SyncDirection.TO_REMOTE)
        self.assertIsInstance(result, NutritionRecommendation)

    async def test_rejected_update_raises(self) -> None:
        self.remote.update_result = False
        with self.assertRaises(ProfileSyncError):
            await self.coordinator.sync_profile(_profile(), SyncDirection.TO_REMOTE)
        self.assertEqual(self.coordinator.state, SyncState.IDLE)

    async def test_invalid_input_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            await self.coordinator.sync_profile(_profile(), "sideways")
        with self.assertRaises(ValidationError):
            await self.coordinator.sync_profile({"weight": -5, "height": 170, "age": 30}, SyncDirection.TO_LOCAL)
        self.assertEqual(self.remote.updates, [])

    async def test_sync_completed_is_emitted_after_save(self) -> None:
        stored_at_emit = []
        self.bus.subscribe(EventKind.SYNC_COMPLETED, lambda e: stored_at_emit.append(self.recommendations.get()))

        result = await self.coordinator.sync_profile(_profile(), SyncDirection.TO_LOCAL)

        event = self.events[-1]
        self.assertEqual(event.kind, EventKind.SYNC_COMPLETED)
        self.assertEqual(event.payload["direction"], "toLocal")
        self.assertEqual(event.payload["recommendation"]["recommended"], 126)
        self.assertEqual(event.payload["profileData"]["goal"], "muscle_gain")
        self.assertEqual(stored_at_emit, [result])

    async def test_handler_triggered_sync_is_dropped(self) -> None:
        nested: List[Any] = []

        def resync(event: Event) -> None:
            nested.append(asyncio.ensure_future(self.coordinator.sync_profile(_profile(), SyncDirection.TO_REMOTE)))

        self.bus.subscribe(EventKind.SYNC_COMPLETED, resync)
        await self.coordinator.sync_profile(_profile(), SyncDirection.TO_LOCAL)

        self.assertEqual(len(nested), 1)
        self.assertIs(await nested[0], ConcurrencyDrop.DEBOUNCED)
        self.assertEqual(self.remote.updates, [])

    async def test_pull_remote_applies_remote_profile(self) -> None:
        self.remote.document = {"weight": 70, "height": 175, "age": 30, "fitnessGoal": "Muscle Gain"}

        result = await self.coordinator.pull_remote()

        self.assertEqual(result.recommended, 126)
        self.assertEqual(result.goal.value, "muscle_gain")
        self.assertEqual([e.kind for e in self.events], [EventKind.PROFILE_UPDATED, EventKind.SYNC_COMPLETED])
        self.assertEqual(self.remote.updates, [])

    async def test_pull_remote_falls_back_to_local(self) -> None:
        self.assertIsNone(await self.coordinator.pull_remote())

        self.remote.fetch_error = RemoteUnavailable("auth expired")
        with self.assertLogs("fitsync.profile.sync", level="WARNING"):
            self.assertIsNone(await self.coordinator.pull_remote())

        self.mutator.add(DAY, {"name": "Eggs", "protein_g": 13})
        self.assertEqual(self.mutator.get_current_protein_intake(), 13)
        self.assertEqual(self.events, [])

    async def test_pull_remote_ignores_out_of_range_profile(self) -> None:
        self.remote.document = {"weight": 70, "height": 400, "age": 30}

        with self.assertLogs("fitsync.profile.sync", level="WARNING"):
            self.assertIsNone(await self.coordinator.pull_remote())

        self.assertEqual(self.events, [])
        self.assertIsNone(self.recommendations.get())
        self.assertEqual(self.coordinator.state, SyncState.IDLE)

    async def test_current_recommendation_defaults(self) -> None:
        self.mutator.add(DAY, {"name": "Whey Protein", "protein_g": 25})

        recommendation = self.coordinator.current_recommendation()

        self.assertEqual(recommendation.recommended, 84)
        self.assertEqual(recommendation.current, 25)
        self.assertEqual(recommendation.last_updated, DAY)
        self.assertEqual(self.recommendations.get(), recommendation)


if __name__ == "__main__":
    unittest.main()
