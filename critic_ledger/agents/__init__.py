"""
Agent implementations for Critic Ledger.

Contains all agent modules that process review records through the pipeline:
- Ingestion Agent
- Identity Normalizer
- Score Normalizer
- Content Classifier + Quarantine Gate
- Record Merger & Deduplicator
- Consistency Validator
- External Review Scorer (Gemini)
- Distribution Summary
"""
