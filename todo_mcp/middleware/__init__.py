"""
HTTP middleware and logging setup.
"""
