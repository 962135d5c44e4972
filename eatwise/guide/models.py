# -*- coding: utf-8 -*-
"""Condition guide — request/response models."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..compatibility.models import Item


class GuideRequest(BaseModel):
    diseases: Union[List[str], str] = Field(
        default_factory=list,
        description="Condition names or aliases; a single string is split on commas/whitespace",
    )
    filter: Optional[str] = Field("all", description="all | avoid | beneficial")


class GuideItem(Item):
    model_config = ConfigDict(populate_by_name=True)

    affected_diseases: List[str] = Field(default_factory=list, alias="affectedDiseases")


class GuideResponse(BaseModel):
    diseases: List[str] = Field(default_factory=list, description="Resolved condition names")
    unresolved: List[str] = Field(default_factory=list, description="Input terms that matched no condition")
    beneficial: List[GuideItem] = Field(default_factory=list)
    avoid: List[GuideItem] = Field(default_factory=list)
