"""
Application Layer for the training load engine.

This package contains:
- ports/: Storage interfaces the engine's callers depend on
- use_cases/: Use cases combining stored logs with the engine
"""
