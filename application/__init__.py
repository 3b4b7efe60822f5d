"""
Application Layer for the training analytics engine.

This package contains:
- ports/: Abstract repository interfaces (what the engine needs)
"""
