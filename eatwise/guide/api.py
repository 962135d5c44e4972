# -*- coding: utf-8 -*-
"""Condition guide — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from .models import GuideRequest, GuideResponse
from .resolver import guide

router = APIRouter(prefix="/api/diseases", tags=["Guide"])


@router.post(
    "/guide",
    response_model=GuideResponse,
    summary="Unified avoid/beneficial food guide for one or more conditions",
)
async def disease_guide(request: GuideRequest):
    return await guide(request.diseases, request.filter)
