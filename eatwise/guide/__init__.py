# -*- coding: utf-8 -*-
"""Condition guide: multi-condition food guidance with avoid-dominance reconciliation."""
