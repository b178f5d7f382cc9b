"""Book Manager - Services Package

This package contains the network-facing modules:
- HTTP client abstraction and result type
- Books REST endpoint map
"""
