"""
Test suite for the packaging engine.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_pick_plan_optimizer.py -v
"""
