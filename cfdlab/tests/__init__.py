"""
Tests for the scalar transport solver core.

Run tests with pytest:
    pytest cfdlab/tests/ -v

Or run individual test files:
    pytest cfdlab/tests/test_solver_1d.py -v
    pytest cfdlab/tests/test_schemes.py -v
"""
