# -*- coding: utf-8 -*-
"""Profile — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..engine import NutritionEngine, get_engine
from ..errors import ConcurrencyDrop, ProfileSyncError, RemoteUnavailable, ValidationError
from .models import NutritionRecommendation, RemoteProfile, SyncRequest, SyncResponse

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("/recommendation", response_model=NutritionRecommendation, summary="Current protein recommendation")
def get_recommendation(engine: NutritionEngine = Depends(get_engine)):
    return engine.coordinator.current_recommendation()


@router.get("/remote", response_model=RemoteProfile, response_model_by_alias=True, summary="Remote profile record")
async def get_remote_profile(engine: NutritionEngine = Depends(get_engine)):
    try:
        remote = await engine.remote.fetch(engine.user_id)
    except RemoteUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    if remote is None:
        raise HTTPException(status_code=404, detail="Remote profile not found")
    return remote


@router.post("/sync", response_model=SyncResponse, summary="Synchronize the profile")
async def sync_profile(request: SyncRequest, engine: NutritionEngine = Depends(get_engine)):
    try:
        result = await engine.coordinator.sync_profile(request.profile, request.direction)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RemoteUnavailable as exc:
        raise HTTPException(status_code=503, detail=f"Remote profile store unavailable: {exc}") from exc
    except ProfileSyncError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    if isinstance(result, ConcurrencyDrop):
        return SyncResponse(status="dropped", reason=result.value)
    return SyncResponse(status="ok", recommendation=result)
