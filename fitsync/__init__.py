# -*- coding: utf-8 -*-
"""FitSync keeps the food log, its cached totals and the remote profile coherent.

Domains:
- ``foodlog``: per-day food entries, cached totals, catalog
- ``profile``: protein recommendation, remote profile store, sync coordinator
"""
