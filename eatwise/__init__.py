# -*- coding: utf-8 -*-
"""EatWise: evidence-weighted ingredient/condition interaction resolution."""

__version__ = "0.1.0"
