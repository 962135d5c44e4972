# -*- coding: utf-8 -*-
"""Source ledger — audit endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter

from ..errors import EntityNotFound
from ..interactions.storage import get_interaction
from ..store import run_store_call
from .models import (
    EVIDENCE_LEVELS,
    EvidenceLevelItem,
    InteractionSourcesResponse,
    SourceRecord,
    SourceRef,
)
from .storage import list_evidence_levels, select_primary, sources_for

router = APIRouter(prefix="/api", tags=["Sources"])


@router.get(
    "/interactions/{interaction_id}/sources",
    response_model=InteractionSourcesResponse,
    summary="All citations linked to an interaction, ranked, with the primary choice",
)
async def interaction_sources(interaction_id: int):
    interaction = await run_store_call(get_interaction, interaction_id)
    if interaction is None:
        raise EntityNotFound(f"Interaction {interaction_id} not found")
    sources = await run_store_call(sources_for, interaction_id)
    score = interaction.evidence_score
    return InteractionSourcesResponse(
        interaction_id=interaction.id,
        itype=interaction.itype,
        evidence_score=score,
        evidence_label=EVIDENCE_LEVELS.get(score, EVIDENCE_LEVELS[0]),
        primary=SourceRef.from_source(select_primary(sources)),
        sources=[SourceRecord.from_source(s) for s in sources],
    )


@router.get("/evidence-levels", response_model=List[EvidenceLevelItem], summary="Evidence score labels")
async def evidence_levels():
    levels = await run_store_call(list_evidence_levels)
    return [EvidenceLevelItem(score=score, label=label) for score, label in sorted(levels.items())]
