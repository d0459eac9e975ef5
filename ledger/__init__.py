# -*- coding: utf-8 -*-
"""
Small-business ledger core: statement parsing, AI-assisted extraction,
classification rules and cash-flow projection.
"""

__version__ = "0.1.0"
