# -*- coding: utf-8 -*-
"""Compatibility resolver: one ingredient -> ranked avoid/beneficial buckets."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from ..catalog.models import EntityType
from ..catalog.storage import get_entity, resolve
from ..errors import EntityNotFound
from ..interactions.models import Edge, InteractionType
from ..interactions.storage import edges_for
from ..sources.models import Source, SourceRef
from ..sources.storage import select_primary, sources_for_many
from ..store import run_store_call
from .models import CompatibilityResponse, Item, ResultFilter

logger = logging.getLogger(__name__)

T = TypeVar("T")


def rank_key(severity: int, name: str, tiebreak: int = 0) -> Tuple[int, str, str, int]:
    """Evidence descending, then name ascending case-insensitively."""
    return (-severity, name.casefold(), name, tiebreak)


def partition_edges(edges: Iterable[Edge]) -> Tuple[List[Edge], List[Edge]]:
    """Split edges into (avoid, benefit), dropping unknown labels."""
    avoid: List[Edge] = []
    benefit: List[Edge] = []
    for edge in edges:
        label = InteractionType.coerce(edge.itype)
        if label is InteractionType.AVOID:
            avoid.append(edge)
        elif label is InteractionType.BENEFIT:
            benefit.append(edge)
        else:
            logger.warning("Dropping interaction %s with unknown type %r", edge.interaction_id, edge.itype)
    return avoid, benefit


def primary_citation(sources: Sequence[Source]) -> List[SourceRef]:
    """Exactly one renderable citation, falling back to an unverified label."""
    return [SourceRef.from_source(select_primary(sources))]


def edge_to_item(edge: Edge, sources: Sequence[Source]) -> Item:
    return Item(
        food=edge.other_name,
        reason=edge.rationale or "",
        severity=edge.evidence_score,
        sources=primary_citation(sources),
    )


def rank_edges(edges: Iterable[Edge], sources: Dict[int, List[Source]]) -> List[Item]:
    ordered = sorted(edges, key=lambda e: rank_key(e.evidence_score, e.other_name, e.interaction_id))
    return [edge_to_item(e, sources.get(e.interaction_id, [])) for e in ordered]


def apply_filter(result_filter: ResultFilter, avoid: List[T], beneficial: List[T]) -> Tuple[List[T], List[T]]:
    """Return (avoid, beneficial) with the bucket excluded by the filter emptied."""
    if result_filter is ResultFilter.AVOID:
        return avoid, []
    if result_filter is ResultFilter.BENEFICIAL:
        return [], beneficial
    return avoid, beneficial


async def compatibility(
    text: str,
    result_filter: object = ResultFilter.ALL,
    *,
    db_path: Path | None = None,
    timeout: Optional[float] = None,
) -> CompatibilityResponse:
    flt = ResultFilter.parse(result_filter)
    ref = await run_store_call(resolve, text, EntityType.INGREDIENT, db_path=db_path, timeout=timeout)
    entity = await run_store_call(get_entity, ref, db_path=db_path, timeout=timeout) if ref else None
    if entity is None:
        raise EntityNotFound(f"No ingredient matches {text.strip()!r}")

    edges = await run_store_call(edges_for, entity.ref, db_path=db_path, timeout=timeout)
    sources = await run_store_call(
        sources_for_many,
        [e.interaction_id for e in edges],
        db_path=db_path,
        timeout=timeout,
    )
    avoid_edges, benefit_edges = partition_edges(edges)
    avoid, beneficial = apply_filter(
        flt,
        rank_edges(avoid_edges, sources),
        rank_edges(benefit_edges, sources),
    )
    logger.info(
        "compatibility %r -> %s (filter=%s, avoid=%d, beneficial=%d)",
        text,
        entity.slug,
        flt.value,
        len(avoid),
        len(beneficial),
    )
    return CompatibilityResponse(
        ingredient=entity.name,
        category=entity.category,
        beneficial=beneficial,
        avoid=avoid,
    )
