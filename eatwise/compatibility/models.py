# -*- coding: utf-8 -*-
"""Compatibility — result filter and response models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..errors import InvalidFilter
from ..sources.models import MAX_EVIDENCE, MIN_EVIDENCE, SourceRef


class ResultFilter(str, Enum):
    ALL = "all"
    AVOID = "avoid"
    BENEFICIAL = "beneficial"

    @classmethod
    def parse(cls, value: object) -> "ResultFilter":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.ALL
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidFilter(f"filter must be one of all, avoid, beneficial; got {value!r}") from None


class Item(BaseModel):
    food: str
    reason: str = ""
    # Evidence score of the claim, shown to users as severity.
    severity: int = Field(..., ge=MIN_EVIDENCE, le=MAX_EVIDENCE)
    sources: List[SourceRef] = Field(default_factory=list)


class CompatibilityResponse(BaseModel):
    ingredient: str
    category: Optional[str] = None
    beneficial: List[Item] = Field(default_factory=list)
    avoid: List[Item] = Field(default_factory=list)
