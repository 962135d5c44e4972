# -*- coding: utf-8 -*-
"""Condition guide resolver.

Resolves a list of conditions, fetches each condition's ingredient edges
concurrently, then reconciles them into one avoid/beneficial answer.

Reconciliation rule: avoid dominates beneficial. An ingredient flagged
``avoid`` by any queried condition is listed only under ``avoid``, with the
conditions that flagged it; it never also appears under ``beneficial``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from ..catalog.models import Entity, EntityRef, EntityType
from ..catalog.storage import get_entity, resolve, split_terms
from ..compatibility.models import ResultFilter
from ..compatibility.resolver import apply_filter, partition_edges, primary_citation, rank_key
from ..config import settings
from ..errors import EntityNotFound, InvalidRequest
from ..interactions.models import Edge
from ..interactions.storage import edges_for
from ..sources.models import Source
from ..sources.storage import sources_for_many
from ..store import run_store_call
from .models import GuideItem, GuideResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Contribution:
    """One condition's claim about one ingredient."""

    condition_index: int
    condition_name: str
    edge: Edge

    def strength_key(self) -> Tuple[int, str, int]:
        return (-self.edge.evidence_score, self.condition_name.casefold(), self.edge.interaction_id)


@dataclass
class IngredientAggregate:
    ingredient: EntityRef
    name: str
    avoid: List[Contribution] = field(default_factory=list)
    benefit: List[Contribution] = field(default_factory=list)

    @property
    def is_avoid(self) -> bool:
        return bool(self.avoid)

    def deciding(self) -> List[Contribution]:
        """Contributions that place the ingredient in its final bucket."""
        return self.avoid if self.avoid else self.benefit


def aggregate(per_condition: Sequence[Tuple[Entity, Sequence[Edge]]]) -> Dict[EntityRef, IngredientAggregate]:
    """Group every condition's ingredient edges by ingredient."""
    aggregates: Dict[EntityRef, IngredientAggregate] = {}
    for index, (condition, edges) in enumerate(per_condition):
        avoid_edges, benefit_edges = partition_edges(e for e in edges if e.other.type is EntityType.INGREDIENT)
        for bucket_name, bucket_edges in (("avoid", avoid_edges), ("benefit", benefit_edges)):
            for edge in bucket_edges:
                agg = aggregates.setdefault(edge.other, IngredientAggregate(edge.other, edge.other_name))
                getattr(agg, bucket_name).append(Contribution(index, condition.name, edge))
    return aggregates


def _affected(contributions: Iterable[Contribution]) -> List[str]:
    names: List[str] = []
    for c in sorted(contributions, key=lambda c: c.condition_index):
        if c.condition_name not in names:
            names.append(c.condition_name)
    return names


def aggregate_to_item(agg: IngredientAggregate, sources: Dict[int, List[Source]]) -> GuideItem:
    deciding = agg.deciding()
    strongest = min(deciding, key=Contribution.strength_key)
    return GuideItem(
        food=agg.name,
        reason=strongest.edge.rationale or "",
        severity=strongest.edge.evidence_score,
        sources=primary_citation(sources.get(strongest.edge.interaction_id, [])),
        affected_diseases=_affected(deciding),
    )


def reconcile(
    aggregates: Iterable[IngredientAggregate],
    sources: Dict[int, List[Source]],
) -> Tuple[List[GuideItem], List[GuideItem]]:
    """Return ranked (avoid, beneficial) buckets with avoid dominating."""
    avoid: List[Tuple[tuple, GuideItem]] = []
    beneficial: List[Tuple[tuple, GuideItem]] = []
    for agg in aggregates:
        item = aggregate_to_item(agg, sources)
        bucket = avoid if agg.is_avoid else beneficial
        bucket.append((rank_key(item.severity, item.food, agg.ingredient.id), item))
    avoid.sort(key=lambda pair: pair[0])
    beneficial.sort(key=lambda pair: pair[0])
    return [item for _, item in avoid], [item for _, item in beneficial]


async def _fan_out(
    fn: Callable[..., T],
    args_list: Sequence[Sequence[Any]],
    *,
    db_path: Path | None,
    timeout: Optional[float],
    **kwargs: Any,
) -> List[T]:
    """Run one bounded store call per argument tuple; any failure fails all."""
    semaphore = asyncio.Semaphore(settings.max_fanout)

    async def one(args: Sequence[Any]) -> T:
        async with semaphore:
            return await run_store_call(fn, *args, db_path=db_path, timeout=timeout, **kwargs)

    return list(await asyncio.gather(*(one(args) for args in args_list)))


async def guide(
    condition_texts: Union[str, Sequence[str], None],
    result_filter: object = ResultFilter.ALL,
    *,
    db_path: Path | None = None,
    timeout: Optional[float] = None,
) -> GuideResponse:
    flt = ResultFilter.parse(result_filter)
    terms = split_terms(condition_texts)
    if not terms:
        raise InvalidRequest("diseases must contain at least one condition name")

    refs = await _fan_out(
        resolve,
        [(term, EntityType.CONDITION) for term in terms],
        db_path=db_path,
        timeout=timeout,
    )
    unresolved = [term for term, ref in zip(terms, refs) if ref is None]
    unique_refs: List[EntityRef] = []
    for ref in refs:
        if ref is not None and ref not in unique_refs:
            unique_refs.append(ref)
    if unresolved:
        logger.warning("Unresolved condition terms: %s", ", ".join(unresolved))
    if not unique_refs:
        raise EntityNotFound(f"No condition matches: {', '.join(terms)}")

    entities = await _fan_out(get_entity, [(ref,) for ref in unique_refs], db_path=db_path, timeout=timeout)
    conditions: List[Entity] = [e for e in entities if e is not None]
    try:
        edge_lists = await _fan_out(
            edges_for,
            [(c.ref,) for c in conditions],
            db_path=db_path,
            timeout=timeout,
            other_type=EntityType.INGREDIENT,
        )
    except Exception:
        logger.error("Guide edge fetch failed for %s", ", ".join(c.slug for c in conditions))
        raise

    aggregates = aggregate(list(zip(conditions, edge_lists)))
    interaction_ids = [c.edge.interaction_id for agg in aggregates.values() for c in agg.deciding()]
    sources = await run_store_call(sources_for_many, interaction_ids, db_path=db_path, timeout=timeout)
    avoid, beneficial = apply_filter(flt, *reconcile(aggregates.values(), sources))

    logger.info(
        "guide %s (filter=%s, avoid=%d, beneficial=%d, unresolved=%d)",
        [c.slug for c in conditions],
        flt.value,
        len(avoid),
        len(beneficial),
        len(unresolved),
    )
    return GuideResponse(
        diseases=[c.name for c in conditions],
        unresolved=unresolved,
        beneficial=beneficial,
        avoid=avoid,
    )
