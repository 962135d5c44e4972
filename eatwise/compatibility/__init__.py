# -*- coding: utf-8 -*-
"""Compatibility resolver for a single ingredient."""
