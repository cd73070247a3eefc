"""
Dependency wiring for request handlers.
"""
