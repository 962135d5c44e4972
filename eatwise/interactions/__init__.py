# -*- coding: utf-8 -*-
"""Interaction store: directed polymorphic edges between catalog entities."""
