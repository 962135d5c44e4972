# -*- coding: utf-8 -*-
"""Compatibility — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from .models import CompatibilityResponse
from .resolver import compatibility

router = APIRouter(prefix="/api/ingredients", tags=["Compatibility"])


@router.get(
    "/{text}/compatibility",
    response_model=CompatibilityResponse,
    summary="Foods and conditions to avoid or favor with one ingredient",
)
async def ingredient_compatibility(
    text: str,
    filter: str = Query(default="all", description="all | avoid | beneficial"),
):
    return await compatibility(text, filter)
