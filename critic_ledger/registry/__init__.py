"""
Lookup tables.

Immutable outlet/critic aliases, rating tables and the read-only show catalog.
Loaded once per run and injected into the normalizers.
"""
