"""
Test suite for dasha_engine

Contains:
- tests/unit/          : Unit tests for domain models, subdivision, traversal and contracts
"""
