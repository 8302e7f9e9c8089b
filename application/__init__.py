"""
Application Layer for the session engine.

This package contains:
- ports/: Abstract repository and device interfaces (what the engine needs)
- exceptions: The engine's error taxonomy
"""
