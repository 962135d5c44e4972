# -*- coding: utf-8 -*-
"""Entity catalog: canonical ingredients and conditions, aliases, text resolution."""

from .models import ConditionKind, Entity, EntityRef, EntityType
from .storage import normalize_key, resolve, split_terms

__all__ = [
    "ConditionKind",
    "Entity",
    "EntityRef",
    "EntityType",
    "normalize_key",
    "resolve",
    "split_terms",
]
