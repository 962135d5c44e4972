# -*- coding: utf-8 -*-
"""Source ledger: citation records, evidence levels and primary-source ranking."""
