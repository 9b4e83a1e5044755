"""
Domain helpers and request-level utilities
"""
