# -*- coding: utf-8 -*-
"""Entity catalog — API endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from ..errors import EntityNotFound, InvalidRequest
from ..store import run_store_call
from .models import EntityResponse, EntityType
from .storage import get_entity, resolve

router = APIRouter(prefix="/api/entities", tags=["Catalog"])


@router.get("/resolve", response_model=EntityResponse, summary="Resolve free text to a catalog entity")
async def resolve_entity(
    q: str = Query(..., min_length=1, description="Ingredient or condition name or alias"),
    kind: Optional[str] = Query(default=None, description="ingredient | condition"),
):
    entity_type: Optional[EntityType] = None
    if kind:
        try:
            entity_type = EntityType.parse(kind)
        except ValueError:
            raise InvalidRequest(f"kind must be ingredient or condition, got {kind!r}") from None
    ref = await run_store_call(resolve, q, entity_type)
    entity = await run_store_call(get_entity, ref) if ref else None
    if entity is None:
        raise EntityNotFound(f"No ingredient or condition matches {q!r}")
    return EntityResponse.from_entity(entity)
