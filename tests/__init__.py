"""Test suite for JoomEngine Image Builder.

This package contains test modules and fixtures for verifying the functionality
of the JoomEngine Image Builder tool. It includes tests for:
- Version parsing and ordering
- Release leadership and tag naming
- Matrix expansion and build state
- Feed parsing
- The I/O layer, plan building and plan execution

The test suite uses pytest and provides fixtures for common test scenarios.
"""
