"""
zk-form Test Suite
==================

Test organization:
- tests/unit/          - Unit tests for shared modules
- tests/services/      - Service logic and API tests

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=shared            # With coverage
"""
