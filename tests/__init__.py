"""
Test suite for the gift exchange matching engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
