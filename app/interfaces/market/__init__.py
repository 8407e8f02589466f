"""
Market interface package: HTTP router, schemas and dependency wiring.
"""
