"""
Utility modules for Critic Ledger.

Cross-cutting concerns:
- Text: Slugs, comparison keys, word counts, URL canonicalization
- Storage: File I/O helpers for data persistence
"""
