# -*- coding: utf-8 -*-
"""Source ledger — citation records and evidence levels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

# Fixed lookup, seeded into the evidence_level table and never mutated.
EVIDENCE_LEVELS: Dict[int, str] = {
    0: "No source",
    1: "Anecdotal / expert opinion",
    2: "Observational study",
    3: "Randomised controlled trial",
    4: "Systematic review / meta-analysis",
    5: "Clinical guideline",
}

MIN_EVIDENCE = 0
MAX_EVIDENCE = 5

UNVERIFIED_LABEL = "Unverified"


def evidence_label(score: int) -> str:
    if score not in EVIDENCE_LEVELS:
        raise ValueError(f"evidence score must be between {MIN_EVIDENCE} and {MAX_EVIDENCE}, got {score!r}")
    return EVIDENCE_LEVELS[score]


@dataclass(frozen=True)
class Source:
    id: int
    label: str
    url: Optional[str] = None
    publisher: Optional[str] = None
    year: Optional[int] = None

    def rank_key(self) -> tuple:
        # Deep-linked first, newest first (unknown year last), then oldest row.
        return (
            0 if self.url else 1,
            -(self.year if self.year is not None else 0),
            self.id,
        )


class SourceRef(BaseModel):
    """Citation as rendered on a result card."""

    label: str
    url: Optional[str] = None

    @classmethod
    def from_source(cls, source: Optional[Source]) -> "SourceRef":
        if source is None:
            return cls(label=UNVERIFIED_LABEL, url=None)
        return cls(label=source.label, url=source.url)


class SourceRecord(BaseModel):
    id: int
    label: str
    url: Optional[str] = None
    publisher: Optional[str] = None
    year: Optional[int] = None

    @classmethod
    def from_source(cls, source: Source) -> "SourceRecord":
        return cls(
            id=source.id,
            label=source.label,
            url=source.url,
            publisher=source.publisher,
            year=source.year,
        )


class InteractionSourcesResponse(BaseModel):
    interaction_id: int
    itype: str
    evidence_score: int = Field(..., ge=MIN_EVIDENCE, le=MAX_EVIDENCE)
    evidence_label: str
    primary: SourceRef
    sources: List[SourceRecord] = Field(default_factory=list)


class EvidenceLevelItem(BaseModel):
    score: int
    label: str
